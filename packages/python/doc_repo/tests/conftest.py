import pytest
from mongomock_motor import AsyncMongoMockClient

from doc_repo import MotorStore
from sample_docs import UsersCollection


@pytest.fixture()
def store():
    # A fresh mock client per test keeps databases isolated.
    return MotorStore(AsyncMongoMockClient()["doc_repo_test"])


@pytest.fixture()
def users(store):
    return UsersCollection(store.collection("users"))
