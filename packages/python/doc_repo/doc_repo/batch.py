"""Multi-document write batches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Literal, Mapping, Optional

from loguru import logger

from .refs import DocumentRef

if TYPE_CHECKING:
    from .store import DocumentStore


@dataclass(frozen=True)
class WriteOp:
    """One queued batch operation."""

    kind: Literal["set", "delete"]
    ref: DocumentRef
    data: Optional[Mapping[str, Any]] = None


class WriteBatch:
    """Collects writes and hands them to the store in one ``commit``.

    Typical use with documents::

        batch = store.batch()
        batch.set(*user1.batch_input)
        batch.set(*user2.batch_input)
        await batch.commit()
    """

    def __init__(self, store: "DocumentStore") -> None:
        self._store = store
        self._ops: List[WriteOp] = []
        self._committed = False

    @property
    def ops(self) -> tuple[WriteOp, ...]:
        return tuple(self._ops)

    def _check_open(self) -> None:
        if self._committed:
            raise ValueError("A write batch can only be committed once")

    def set(self, ref: DocumentRef, data: Mapping[str, Any]) -> "WriteBatch":
        self._check_open()
        self._ops.append(WriteOp("set", ref, dict(data)))
        return self

    def delete(self, ref: DocumentRef) -> "WriteBatch":
        self._check_open()
        self._ops.append(WriteOp("delete", ref))
        return self

    async def commit(self) -> None:
        self._check_open()
        self._committed = True
        logger.debug("Committing write batch with {count} ops", count=len(self._ops))
        await self._store.commit(self._ops)

    def __len__(self) -> int:
        return len(self._ops)
