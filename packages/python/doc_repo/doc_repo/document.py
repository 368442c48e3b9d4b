"""Typed documents: one stored record bound to an id and a location."""

from __future__ import annotations

from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Dict,
    Generic,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
)

from .refs import CollectionRef, DocumentRef
from .store import Snapshot, TData

if TYPE_CHECKING:
    from .collection import Collection

TDoc = TypeVar("TDoc", bound="Document")


class SubCollection:
    """Declare a child collection on a ``Document`` subclass.

    ``factory`` receives the child ``CollectionRef`` (parent document ref plus
    ``name``) and returns the collection object, usually a ``Collection``
    subclass::

        class UserDoc(Document[UserData]):
            posts = SubCollection("posts", PostCollection)

    The collection is built once per document, when the document is built.
    """

    def __init__(self, name: str, factory: Callable[[CollectionRef], "Collection"]) -> None:
        self.name = name
        self.factory = factory
        self.attr: Optional[str] = None

    def __set_name__(self, owner: type, attr: str) -> None:
        self.attr = attr

    def __get__(self, instance: Optional["Document"], owner: type):
        if instance is None:
            return self
        return instance._collections[self.attr]


class Document(Generic[TData]):
    """One record of a known shape.

    The payload is kept in a private dict; ``data`` is a copy of it and is
    what gets written to the store. ``id``, ``ref`` and the declared
    sub-collections are never part of it.
    """

    _subcollections: ClassVar[Dict[str, SubCollection]] = {}

    id: str
    ref: DocumentRef

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        declared: Dict[str, SubCollection] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                if isinstance(value, SubCollection):
                    declared[attr] = value
        cls._subcollections = declared

    def __init__(self, snapshot: Snapshot[TData]) -> None:
        self.id = snapshot.id
        self.ref = snapshot.ref
        self._payload: Dict[str, Any] = dict(snapshot.data)
        self._collections: Dict[str, Any] = {
            attr: sub.factory(self.ref.collection(sub.name))
            for attr, sub in self._subcollections.items()
        }

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls: Type[TDoc],
        collection: "Collection | CollectionRef",
        id: Optional[str],
        data: Mapping[str, Any],
    ) -> TDoc:
        return create_document(cls, collection, id, data)

    # ------------------------------------------------------------------
    # Payload access
    # ------------------------------------------------------------------

    @property
    def data(self) -> TData:
        return dict(self._payload)  # type: ignore[return-value]

    @property
    def collections(self) -> Mapping[str, Any]:
        """Sub-collections declared on this document class, by attribute name."""
        return MappingProxyType(self._collections)

    @property
    def batch_input(self) -> Tuple[DocumentRef, TData]:
        return self.ref, self.data

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails; expose payload fields read-only.
        payload = self.__dict__.get("_payload")
        if payload is not None and name in payload:
            return payload[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __getitem__(self, key: str) -> Any:
        return self._payload[key]

    def __contains__(self, key: object) -> bool:
        return key in self._payload

    def get(self, key: str, default: Any = None) -> Any:
        return self._payload.get(key, default)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, data={self._payload!r})"

    # ------------------------------------------------------------------
    # Mutation and persistence
    # ------------------------------------------------------------------

    def edit(self: TDoc, data: Optional[Mapping[str, Any]] = None, /, **fields: Any) -> TDoc:
        """Merge fields into the in-memory payload. No I/O."""
        if data:
            self._payload.update(data)
        if fields:
            self._payload.update(fields)
        return self

    async def save(self: TDoc) -> TDoc:
        """Write the whole payload to ``ref``, replacing what is stored there."""
        await self.ref.store.put(self.ref, self.data)
        return self

    async def delete(self: TDoc) -> TDoc:
        """Remove the stored record. The in-memory payload is left as is."""
        await self.ref.store.remove(self.ref)
        return self


def make_create_input(
    collection: "Collection | CollectionRef",
    id: Optional[str],
    data: Mapping[str, Any],
) -> Snapshot:
    """Build the snapshot for a document that does not exist yet.

    With ``id`` the location is ``collection.ref/id``; without one (or with an
    empty one) the store allocates a fresh id.
    """
    parent = collection if isinstance(collection, CollectionRef) else collection.ref
    ref = parent.document(id or None)
    return Snapshot(id=ref.id, ref=ref, data=data)


def create_document(
    factory: Callable[[Snapshot], TDoc],
    collection: "Collection | CollectionRef",
    id: Optional[str],
    data: Mapping[str, Any],
) -> TDoc:
    """Create a new, unsaved document of the kind ``factory`` builds."""
    return factory(make_create_input(collection, id, data))
