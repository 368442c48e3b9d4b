"""Location references for collections and documents, plus the query value.

References are path based: a root collection is ``users``, a document in it is
``users/1`` and a sub-collection of that document is ``users/1/posts``. A
reference carries the store it belongs to so documents can read and write
themselves without a live collection object.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple, Type

from pymongo import ASCENDING, DESCENDING

from .errors import InvalidReferenceError

if TYPE_CHECKING:
    from .store import DocumentStore

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "DOCUMENT_ID",
    "PATH_SEPARATOR",
    "CollectionRef",
    "DocumentRef",
    "Query",
]

PATH_SEPARATOR = "/"

# Field name that addresses the document id in filters and orderings.
DOCUMENT_ID = "_id"


def _check_segment(segment: str, kind: str, error: Type[Exception] = ValueError) -> str:
    if not isinstance(segment, str) or not segment:
        raise error(f"{kind} must be a non-empty string, got {segment!r}")
    if PATH_SEPARATOR in segment:
        raise error(f"{kind} {segment!r} must not contain {PATH_SEPARATOR!r}")
    return segment


def _split(path: str) -> list[str]:
    return path.split(PATH_SEPARATOR)


@dataclass(frozen=True)
class CollectionRef:
    """Reference to a collection root, e.g. ``users`` or ``users/1/posts``."""

    store: "DocumentStore" = field(compare=False, repr=False)
    path: str

    def __post_init__(self) -> None:
        segments = _split(self.path)
        if len(segments) % 2 != 1:
            raise ValueError(f"{self.path!r} is a document path, not a collection path")
        for segment in segments:
            _check_segment(segment, "Path segment")

    @property
    def id(self) -> str:
        return _split(self.path)[-1]

    @property
    def parent(self) -> Optional["DocumentRef"]:
        """The document owning this collection, or ``None`` for a root collection."""
        segments = _split(self.path)
        if len(segments) == 1:
            return None
        return DocumentRef(self.store, PATH_SEPARATOR.join(segments[:-1]))

    def document(self, id: Optional[str] = None) -> "DocumentRef":
        """Reference a document in this collection.

        Without an id the store allocates a fresh one.
        """
        if id is None:
            id = self.store.allocate_id()
        _check_segment(id, "Document id", InvalidReferenceError)
        return DocumentRef(self.store, f"{self.path}{PATH_SEPARATOR}{id}")

    # Query shortcuts -----------------------------------------------------

    def query(self) -> "Query":
        return Query(self)

    def where(self, filter: Optional[Mapping[str, Any]] = None, **equals: Any) -> "Query":
        return self.query().where(filter, **equals)

    def order_by(self, field_name: str, direction: int = ASCENDING) -> "Query":
        return self.query().order_by(field_name, direction)

    def limit(self, count: int) -> "Query":
        return self.query().limit(count)


@dataclass(frozen=True)
class DocumentRef:
    """Reference to a single document, e.g. ``users/1``."""

    store: "DocumentStore" = field(compare=False, repr=False)
    path: str

    def __post_init__(self) -> None:
        segments = _split(self.path)
        if len(segments) % 2 != 0:
            raise ValueError(f"{self.path!r} is a collection path, not a document path")
        for segment in segments:
            _check_segment(segment, "Path segment")

    @property
    def id(self) -> str:
        return _split(self.path)[-1]

    @property
    def parent(self) -> CollectionRef:
        return CollectionRef(self.store, PATH_SEPARATOR.join(_split(self.path)[:-1]))

    def collection(self, name: str) -> CollectionRef:
        """Reference the sub-collection ``name`` under this document."""
        _check_segment(name, "Collection name", InvalidReferenceError)
        return CollectionRef(self.store, f"{self.path}{PATH_SEPARATOR}{name}")


@dataclass(frozen=True)
class Query:
    """Immutable query over one collection.

    ``filter`` is a MongoDB filter document and is passed to the store as is.
    Every builder method returns a new ``Query``.
    """

    parent: CollectionRef
    filter: Mapping[str, Any] = field(default_factory=dict)
    sort: Tuple[Tuple[str, int], ...] = ()
    limit_to: Optional[int] = None
    skip: int = 0

    def where(self, filter: Optional[Mapping[str, Any]] = None, **equals: Any) -> "Query":
        merged = dict(self.filter)
        merged.update(filter or {})
        merged.update(equals)
        return replace(self, filter=merged)

    def order_by(self, field_name: str, direction: int = ASCENDING) -> "Query":
        if direction not in (ASCENDING, DESCENDING):
            raise ValueError(f"Unsupported sort direction {direction!r}")
        return replace(self, sort=self.sort + ((field_name, direction),))

    def limit(self, count: int) -> "Query":
        if count < 0:
            raise ValueError("limit must not be negative")
        return replace(self, limit_to=count)

    def offset(self, count: int) -> "Query":
        if count < 0:
            raise ValueError("offset must not be negative")
        return replace(self, skip=count)
