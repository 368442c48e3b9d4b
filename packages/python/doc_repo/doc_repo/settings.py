"""Configuration for the MongoDB-backed document store.

Applications can assign a new ``StoreSettings`` instance to
``doc_repo.settings.settings`` before the first call to ``get_store`` to
override the environment-derived defaults.
"""
import os

from loguru import logger
from pydantic import BaseModel, Field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class StoreSettings(BaseModel):
    """Connection settings for the document store."""

    uri: str = Field(
        default_factory=lambda: os.getenv("MONGO_URI", "mongodb://localhost:27017")
    )
    db_name: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "doc_repo"))
    server_selection_timeout_ms: int = Field(
        default_factory=lambda: int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000"))
    )
    # Transactions need a replica set; standalone servers reject them.
    use_transactions: bool = Field(
        default_factory=lambda: _env_flag("MONGO_USE_TRANSACTIONS")
    )


settings: StoreSettings = StoreSettings()
logger.debug(
    "StoreSettings initialized with uri={uri} db_name={db_name}",
    uri=settings.uri,
    db_name=settings.db_name,
)
