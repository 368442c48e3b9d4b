import pytest

from doc_repo import StoreSettings
from doc_repo import mongo


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("MONGO_URI", "mongodb://db.internal:27018")
    monkeypatch.setenv("MONGO_DB_NAME", "catalog")
    monkeypatch.setenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "1500")
    monkeypatch.setenv("MONGO_USE_TRANSACTIONS", "true")

    settings = StoreSettings()

    assert settings.uri == "mongodb://db.internal:27018"
    assert settings.db_name == "catalog"
    assert settings.server_selection_timeout_ms == 1500
    assert settings.use_transactions is True


def test_settings_defaults(monkeypatch):
    for name in (
        "MONGO_URI",
        "MONGO_DB_NAME",
        "MONGO_SERVER_SELECTION_TIMEOUT_MS",
        "MONGO_USE_TRANSACTIONS",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = StoreSettings()

    assert settings.uri == "mongodb://localhost:27017"
    assert settings.db_name == "doc_repo"
    assert settings.use_transactions is False


@pytest.mark.asyncio
async def test_get_store_uses_active_settings(monkeypatch):
    monkeypatch.setattr(
        mongo._settings,
        "settings",
        StoreSettings(uri="mongodb://localhost:27017", db_name="override", use_transactions=True),
    )
    mongo.close_mongo_client()
    try:
        store = mongo.get_store()

        assert store.db.name == "override"
        assert mongo.get_mongo_client() is mongo.get_mongo_client()
    finally:
        mongo.close_mongo_client()
