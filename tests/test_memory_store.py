import pytest

from mungori.store import (
    CONVERSATIONS,
    MESSAGES,
    POSTS,
    MemoryStore,
    ObjectExistsError,
    RowNotFoundError,
)


@pytest.mark.asyncio
async def test_seeded_store_returns_newest_first(memory_store):
    rows = await memory_store.select(POSTS)
    assert [row["id"] for row in rows] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_select_filters_and_orders_ascending(memory_store):
    rows = await memory_store.select(
        MESSAGES, filters={"conversation_id": "2"}, order_by="created_at", descending=False
    )
    assert [row["id"] for row in rows] == ["2-1", "2-2", "2-3"]


@pytest.mark.asyncio
async def test_insert_synthesises_distinct_ids_and_timestamps():
    store = MemoryStore(seeded=False)
    rows = await store.insert(POSTS, [{"content": "a"}, {"content": "b"}, {"content": "c"}])

    ids = [row["id"] for row in rows]
    assert len(set(ids)) == 3
    assert [int(value) for value in ids] == sorted(int(value) for value in ids)
    assert all(row["created_at"] for row in rows)


@pytest.mark.asyncio
async def test_conversation_rows_get_updated_at():
    store = MemoryStore(seeded=False)
    [row] = await store.insert(CONVERSATIONS, [{"nickname": "n", "unread": False}])
    assert row["updated_at"] == row["created_at"]


@pytest.mark.asyncio
async def test_selected_rows_are_copies(memory_store):
    rows = await memory_store.select(POSTS)
    rows[0]["likes"] = 999
    again = await memory_store.select(POSTS)
    assert again[0]["likes"] != 999


@pytest.mark.asyncio
async def test_update_unknown_row_raises(memory_store):
    with pytest.raises(RowNotFoundError):
        await memory_store.update(POSTS, "missing", {"likes": 1})


@pytest.mark.asyncio
async def test_update_and_delete(memory_store):
    row = await memory_store.update(POSTS, "1", {"likes": 13})
    assert row["likes"] == 13

    await memory_store.delete(POSTS, "1")
    assert [row["id"] for row in memory_store.rows(POSTS)] == ["2", "3"]


@pytest.mark.asyncio
async def test_upload_never_overwrites():
    store = MemoryStore(seeded=False)
    await store.upload("bucket", "a/b.png", b"first")
    with pytest.raises(ObjectExistsError):
        await store.upload("bucket", "a/b.png", b"second")
    assert store.objects("bucket") == {"a/b.png": b"first"}


@pytest.mark.asyncio
async def test_remove_ignores_missing_paths():
    store = MemoryStore(seeded=False)
    await store.upload("bucket", "keep.png", b"1")
    await store.upload("bucket", "drop.png", b"2")
    await store.remove("bucket", ["drop.png", "never-there.png"])
    assert list(store.objects("bucket")) == ["keep.png"]
    assert store.get_public_url("bucket", "keep.png") == "memory://storage/bucket/keep.png"
