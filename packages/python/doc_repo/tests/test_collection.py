import pytest

from doc_repo import DESCENDING, DOCUMENT_ID, Collection, NotFoundError, StoreFailureError
from sample_docs import UserDoc


async def _seed(store):
    users_ref = store.collection("users")
    await store.put(users_ref.document("1"), {"name": "Ant Man", "rank": 1})
    await store.put(users_ref.document("2"), {"name": "Bird Man", "rank": 2})
    await store.put(users_ref.document("3"), {"name": "Cat Man", "rank": 3})


@pytest.mark.asyncio
async def test_find_one(store, users):
    await _seed(store)

    user = await users.find_one("1")

    assert isinstance(user, UserDoc)
    assert user.id == "1"
    assert user.ref == store.collection("users").document("1")
    assert user.data == {"name": "Ant Man", "rank": 1}


@pytest.mark.asyncio
async def test_find_one_missing_raises_not_found(store, users):
    await _seed(store)

    with pytest.raises(NotFoundError) as excinfo:
        await users.find_one("1_000")

    assert excinfo.value.ref.path == "users/1_000"


@pytest.mark.asyncio
async def test_find_one_or_none(store, users):
    await _seed(store)

    user = await users.find_one_or_none("1")

    assert user is not None
    assert user.name == "Ant Man"
    assert await users.find_one_or_none("1_000") is None


@pytest.mark.asyncio
async def test_find_one_or_none_on_empty_collection(users):
    assert await users.find_one_or_none("missing") is None


@pytest.mark.asyncio
async def test_empty_payload_is_still_found(store, users):
    await store.put(users.ref.document("blank"), {})

    user = await users.find_one("blank")

    assert user.data == {}


@pytest.mark.asyncio
async def test_find_many_by_query_keeps_store_order(store, users):
    await _seed(store)

    found = await users.find_many_by_query(lambda ref: ref.order_by("rank", DESCENDING))

    assert [u.name for u in found] == ["Cat Man", "Bird Man", "Ant Man"]


@pytest.mark.asyncio
async def test_find_many_by_query_with_filter_and_limit(store, users):
    await _seed(store)

    found = await users.find_many_by_query(
        lambda ref: ref.where({"rank": {"$gte": 2}}).order_by(DOCUMENT_ID).limit(1)
    )

    assert [u.id for u in found] == ["2"]


@pytest.mark.asyncio
async def test_find_many_by_query_accepts_bare_ref(store, users):
    await _seed(store)

    found = await users.find_many_by_query(lambda ref: ref)

    assert sorted(u.id for u in found) == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_find_many_by_query_without_matches_is_empty(store, users):
    await _seed(store)

    assert await users.find_many_by_query(lambda ref: ref.where(name="Dog Man")) == []
    assert await users.find_many_by_query(lambda ref: ref.limit(0)) == []


@pytest.mark.asyncio
async def test_transformer_is_applied_to_every_result(store):
    await _seed(store)
    names = Collection(store.collection("users"), lambda snap: snap.data["name"].upper())

    assert await names.find_one("2") == "BIRD MAN"
    assert await names.find_many_by_query(lambda ref: ref.order_by("name")) == [
        "ANT MAN",
        "BIRD MAN",
        "CAT MAN",
    ]


def test_transformer_is_fixed_at_construction(users):
    transformer = users.transformer

    assert users.transformer is transformer
    with pytest.raises(AttributeError):
        users.transformer = lambda snap: snap


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["a/b", ""])
async def test_malformed_id_raises_store_failure(users, bad_id):
    with pytest.raises(StoreFailureError):
        await users.find_one(bad_id)
    with pytest.raises(StoreFailureError):
        await users.find_one_or_none(bad_id)
