"""Typed collections: fetch raw records and turn them into documents."""

from __future__ import annotations

from typing import Callable, Generic, List, Optional, TypeVar, Union

from loguru import logger

from .errors import NotFoundError
from .refs import CollectionRef, Query
from .store import Snapshot, TData

TTransformed = TypeVar("TTransformed")

QueryFn = Callable[[CollectionRef], Union[Query, CollectionRef]]


class Collection(Generic[TData, TTransformed]):
    """One logical collection of same-shaped records.

    ``transformer`` turns a fetched ``Snapshot`` into the caller's document
    type; a ``Document`` subclass can be passed directly. Collections only
    read: writes go through the documents themselves.
    """

    def __init__(
        self,
        ref: CollectionRef,
        transformer: Callable[[Snapshot[TData]], TTransformed],
    ) -> None:
        self._ref = ref
        self._transformer = transformer

    @property
    def ref(self) -> CollectionRef:
        return self._ref

    @property
    def transformer(self) -> Callable[[Snapshot[TData]], TTransformed]:
        return self._transformer

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._ref.path!r})"

    async def _fetch(self, id: str) -> Optional[Snapshot[TData]]:
        ref = self._ref.document(id)
        snap = await ref.store.fetch_one(ref)
        # An existing record always carries a mapping, possibly empty.
        if snap is None or snap.data is None:
            return None
        return snap

    async def find_one(self, id: str) -> TTransformed:
        """Return the document ``id`` or raise ``NotFoundError``."""
        snap = await self._fetch(id)
        if snap is None:
            raise NotFoundError(self._ref.document(id))
        return self._transformer(snap)

    async def find_one_or_none(self, id: str) -> Optional[TTransformed]:
        """Return the document ``id``, or ``None`` when it does not exist."""
        snap = await self._fetch(id)
        if snap is None:
            return None
        return self._transformer(snap)

    async def find_many_by_query(self, query_fn: QueryFn) -> List[TTransformed]:
        """Run the query built by ``query_fn`` and transform every result.

        ``query_fn`` receives this collection's ref and returns a ``Query``
        (or the ref itself to fetch everything). Results keep the store's order.
        """
        query = query_fn(self._ref)
        if isinstance(query, CollectionRef):
            query = query.query()
        snaps = await self._ref.store.fetch_many(query)
        logger.debug(
            "Query on {path} returned {count} documents",
            path=self._ref.path,
            count=len(snaps),
        )
        return [self._transformer(snap) for snap in snaps]


def collection_of(
    transformer: Callable[[Snapshot[TData]], TTransformed],
) -> Callable[[CollectionRef], "Collection[TData, TTransformed]"]:
    """Factory for ``SubCollection`` when no ``Collection`` subclass is needed."""

    def build(ref: CollectionRef) -> Collection[TData, TTransformed]:
        return Collection(ref, transformer)

    return build


__all__ = ["Collection", "QueryFn", "collection_of"]
