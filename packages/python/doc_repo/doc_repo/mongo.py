"""MongoDB document store built on top of Motor.

Each collection path (``users``, ``users/1/posts``) is stored as its own MongoDB
collection. The document id lives in ``_id``; every other field is payload.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Iterator, Mapping, Optional, Sequence

from bson.errors import BSONError
from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from . import settings as _settings
from .batch import WriteOp
from .errors import StoreFailureError
from .refs import DOCUMENT_ID, CollectionRef, DocumentRef, Query
from .store import DocumentStore, Snapshot


@contextmanager
def _store_call(operation: str, target: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    except (PyMongoError, BSONError) as exc:
        duration = (time.perf_counter() - start) * 1000
        logger.warning(
            "Store {operation} {target} failed after {duration:.2f} ms: {error}",
            operation=operation,
            target=target,
            duration=duration,
            error=exc,
        )
        raise StoreFailureError(f"{operation} {target} failed: {exc}") from exc
    duration = (time.perf_counter() - start) * 1000
    logger.debug(
        "Store {operation} {target} completed in {duration:.2f} ms",
        operation=operation,
        target=target,
        duration=duration,
    )


class MotorStore(DocumentStore):
    """``DocumentStore`` backed by an ``AsyncIOMotorDatabase``."""

    def __init__(self, db: AsyncIOMotorDatabase, *, use_transactions: bool = False) -> None:
        self._db = db
        self._use_transactions = use_transactions

    @property
    def db(self) -> AsyncIOMotorDatabase:
        return self._db

    def _collection(self, ref: CollectionRef):
        return self._db[ref.path]

    @staticmethod
    def _to_snapshot(parent: CollectionRef, doc: Mapping[str, Any]) -> Snapshot:
        payload = dict(doc)
        doc_id = str(payload.pop(DOCUMENT_ID))
        return Snapshot(id=doc_id, ref=parent.document(doc_id), data=payload)

    @staticmethod
    def _to_record(ref: DocumentRef, data: Mapping[str, Any]) -> dict[str, Any]:
        record = {DOCUMENT_ID: ref.id}
        record.update((key, value) for key, value in data.items() if key != DOCUMENT_ID)
        return record

    async def fetch_one(self, ref: DocumentRef) -> Optional[Snapshot]:
        with _store_call("fetch_one", ref.path):
            doc = await self._collection(ref.parent).find_one({DOCUMENT_ID: ref.id})
        if doc is None:
            return None
        return self._to_snapshot(ref.parent, doc)

    async def fetch_many(self, query: Query) -> list[Snapshot]:
        # MongoDB treats limit=0 as "no limit".
        if query.limit_to == 0:
            return []

        options: dict[str, Any] = {}
        if query.sort:
            options["sort"] = list(query.sort)
        if query.skip:
            options["skip"] = query.skip
        if query.limit_to is not None:
            options["limit"] = query.limit_to

        with _store_call("fetch_many", query.parent.path):
            cursor = self._collection(query.parent).find(dict(query.filter), **options)
            docs = [doc async for doc in cursor]
        return [self._to_snapshot(query.parent, doc) for doc in docs]

    async def put(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        with _store_call("put", ref.path):
            await self._collection(ref.parent).replace_one(
                {DOCUMENT_ID: ref.id},
                self._to_record(ref, data),
                upsert=True,
            )

    async def remove(self, ref: DocumentRef) -> None:
        with _store_call("remove", ref.path):
            await self._collection(ref.parent).delete_one({DOCUMENT_ID: ref.id})

    async def _apply(self, ops: Sequence[WriteOp], session=None) -> None:
        extra = {"session": session} if session is not None else {}
        for op in ops:
            collection = self._collection(op.ref.parent)
            if op.kind == "set":
                await collection.replace_one(
                    {DOCUMENT_ID: op.ref.id},
                    self._to_record(op.ref, op.data or {}),
                    upsert=True,
                    **extra,
                )
            else:
                await collection.delete_one({DOCUMENT_ID: op.ref.id}, **extra)

    async def commit(self, ops: Sequence[WriteOp]) -> None:
        if not ops:
            return
        target = f"batch of {len(ops)}"
        with _store_call("commit", target):
            if not self._use_transactions:
                await self._apply(ops)
                return
            async with await self._db.client.start_session() as session:
                async with session.start_transaction():
                    await self._apply(ops, session)

    async def clear(self) -> None:
        """Drop every collection in the database."""
        with _store_call("clear", self._db.name):
            for name in await self._db.list_collection_names():
                await self._db.drop_collection(name)


@lru_cache
def get_mongo_client() -> AsyncIOMotorClient:
    """Return a cached Motor client configured via ``doc_repo.settings``."""

    active = _settings.settings
    return AsyncIOMotorClient(
        active.uri,
        serverSelectionTimeoutMS=active.server_selection_timeout_ms,
    )


def get_db() -> AsyncIOMotorDatabase:
    """Return the database named by ``settings.db_name``."""

    return get_mongo_client()[_settings.settings.db_name]


def get_store() -> MotorStore:
    """Return a store over the configured database."""

    return MotorStore(get_db(), use_transactions=_settings.settings.use_transactions)


def close_mongo_client() -> None:
    """Close the cached client, if one was created, and forget it."""

    if get_mongo_client.cache_info().currsize:
        get_mongo_client().close()
    get_mongo_client.cache_clear()


async def ping() -> dict[str, Any]:
    """Run a simple ``ping`` command against the configured MongoDB server."""

    with _store_call("ping", _settings.settings.db_name):
        await get_db().command("ping")
    return {"ok": True}
