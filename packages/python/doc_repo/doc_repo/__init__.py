"""Typed documents and collections over a document store.

Example usage::

    from doc_repo import Collection, Document, SubCollection, get_store

    class PostDoc(Document):
        pass

    class UserDoc(Document):
        posts = SubCollection("posts", lambda ref: Collection(ref, PostDoc))

    users = Collection(get_store().collection("users"), UserDoc)
    user = await UserDoc.create(users, "1", {"name": "Taro"}).save()
    again = await users.find_one("1")
"""

from .batch import WriteBatch, WriteOp
from .collection import Collection, collection_of
from .document import Document, SubCollection, create_document, make_create_input
from .errors import DocumentRepoError, InvalidReferenceError, NotFoundError, StoreFailureError
from .mongo import MotorStore, close_mongo_client, get_db, get_mongo_client, get_store, ping
from .refs import ASCENDING, DESCENDING, DOCUMENT_ID, CollectionRef, DocumentRef, Query
from .settings import StoreSettings
from .store import DocumentStore, Snapshot

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "DOCUMENT_ID",
    "Collection",
    "CollectionRef",
    "Document",
    "DocumentRef",
    "DocumentRepoError",
    "DocumentStore",
    "InvalidReferenceError",
    "MotorStore",
    "NotFoundError",
    "Query",
    "Snapshot",
    "StoreFailureError",
    "StoreSettings",
    "SubCollection",
    "WriteBatch",
    "WriteOp",
    "close_mongo_client",
    "collection_of",
    "create_document",
    "get_db",
    "get_mongo_client",
    "get_store",
    "make_create_input",
    "ping",
]
