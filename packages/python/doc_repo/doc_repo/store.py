"""Store capability set consumed by documents and collections."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Mapping, Optional, Sequence, TypeVar
from uuid import uuid4

from .refs import CollectionRef, DocumentRef, Query

if TYPE_CHECKING:
    from .batch import WriteBatch, WriteOp

TData = TypeVar("TData", bound=Mapping[str, Any])


@dataclass(frozen=True)
class Snapshot(Generic[TData]):
    """A raw record as read from (or about to be written to) the store."""

    id: str
    ref: DocumentRef
    data: TData


class DocumentStore(ABC):
    """Primitives a backing database has to provide.

    Implementations raise ``StoreFailureError`` for any failed call.
    """

    def collection(self, path: str) -> CollectionRef:
        """Return a reference to the collection at ``path``."""
        return CollectionRef(self, path)

    def allocate_id(self) -> str:
        """Generate a fresh document id; no I/O."""
        return uuid4().hex

    def batch(self) -> "WriteBatch":
        from .batch import WriteBatch

        return WriteBatch(self)

    @abstractmethod
    async def fetch_one(self, ref: DocumentRef) -> Optional[Snapshot]:
        """Point read. Returns ``None`` when the document does not exist."""

    @abstractmethod
    async def fetch_many(self, query: Query) -> list[Snapshot]:
        """Execute ``query`` and return snapshots in the store's order."""

    @abstractmethod
    async def put(self, ref: DocumentRef, data: Mapping[str, Any]) -> None:
        """Create or fully replace the document at ``ref``."""

    @abstractmethod
    async def remove(self, ref: DocumentRef) -> None:
        """Delete the document at ``ref``; deleting a missing one is not an error."""

    @abstractmethod
    async def commit(self, ops: Sequence["WriteOp"]) -> None:
        """Apply queued batch operations in order."""
