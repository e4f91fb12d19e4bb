import pytest

from mungori.schemas import ItemStatus, MarketItemDraft, MarketItemPatch, PendingFile
from mungori.services.notifications import NotificationLevel
from mungori.store import MARKET_ITEM_IMAGES, MARKET_ITEMS
from mungori.viewmodels import ListingFilter, MarketViewModel

TEST_BUCKET = "test-images"


def photos(count: int, size: int = 16) -> list[PendingFile]:
    return [PendingFile(name=f"p{index}.webp", data=b"\x00" * size) for index in range(count)]


@pytest.fixture()
def market(remote_store, notifier, pipeline):
    return MarketViewModel(remote_store, notifier, pipeline)


def draft(**overrides) -> MarketItemDraft:
    values = {"title": "Standing desk", "description": "Barely used", "category": "household"}
    values.update(overrides)
    return MarketItemDraft(**values)


@pytest.mark.asyncio
async def test_filtered_tabs(market):
    await market.load()

    assert [entry.id for entry in market.filtered(ListingFilter.ALL)] == ["m2", "m1"]
    assert [entry.id for entry in market.filtered("sell")] == ["m1"]
    assert [entry.id for entry in market.filtered(ListingFilter.FREE)] == ["m2"]


@pytest.mark.asyncio
async def test_free_listing_is_stored_without_price(market, remote_store):
    await market.load()

    entry = await market.create(draft(type="free", price="30,000 KRW"))

    assert entry.stored.price is None
    assert entry.stored.status == ItemStatus.AVAILABLE
    assert remote_store.inner.rows(MARKET_ITEMS)[-1]["price"] is None


@pytest.mark.asyncio
async def test_sell_listing_keeps_price(market):
    await market.load()
    entry = await market.create(draft(type="sell", price=" 30,000 KRW "))
    assert entry.stored.price == "30,000 KRW"


@pytest.mark.asyncio
async def test_create_with_photos_keeps_their_order(market, remote_store):
    await market.load()

    entry = await market.create(draft(), photos(3))

    images = market.images(entry.id)
    assert [image.sort_order for image in images] == [0, 1, 2]
    assert [image.path.rsplit("-", 1)[1] for image in images] == ["0.webp", "1.webp", "2.webp"]
    assert len(remote_store.inner.objects(TEST_BUCKET)) == 3


@pytest.mark.asyncio
async def test_oversized_photo_creates_nothing(market, remote_store, notifier):
    await market.load()
    calls_before = len(remote_store.calls)

    entry = await market.create(draft(), photos(2) + [PendingFile(name="big.png", data=b"x" * 4096)])

    assert entry is None
    assert len(remote_store.calls) == calls_before
    assert len(market) == 2
    assert notifier.history[-1].level == NotificationLevel.ERROR
    assert notifier.history[-1].action == "attach images"


@pytest.mark.asyncio
async def test_upload_failure_keeps_the_listing(market, remote_store, notifier):
    await market.load()
    remote_store.fail("upload")

    entry = await market.create(draft(), photos(2))

    assert entry is not None
    assert market.get(entry.id) is entry
    assert market.images(entry.id) == []
    assert notifier.history[-1].action == "upload images"


@pytest.mark.asyncio
async def test_attach_images_appends_after_existing(market):
    await market.load()
    entry = await market.create(draft(), photos(2))

    images = await market.attach_images(entry.id, photos(2))

    assert [image.sort_order for image in images] == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_attach_images_respects_limit(market, notifier):
    await market.load()
    entry = await market.create(draft(), photos(4))

    assert await market.attach_images(entry.id, photos(2)) is None
    assert len(market.images(entry.id)) == 4
    assert notifier.history[-1].level == NotificationLevel.ERROR


@pytest.mark.asyncio
async def test_set_status(market, remote_store):
    await market.load()

    entry = await market.set_status("m1", "reserved")

    assert entry.stored.status == ItemStatus.RESERVED
    assert remote_store.inner.rows(MARKET_ITEMS)[0]["status"] == "reserved"


@pytest.mark.asyncio
async def test_switching_to_free_clears_price(market, remote_store):
    await market.load()

    entry = await market.update("m1", MarketItemPatch(type="free"))

    assert entry.stored.price is None
    assert remote_store.inner.rows(MARKET_ITEMS)[0]["price"] is None


@pytest.mark.asyncio
async def test_price_edit_on_free_listing_is_dropped(market, remote_store):
    await market.load()

    entry = await market.update("m2", {"price": "9,000 KRW"})

    assert entry.stored.price is None
    assert remote_store.inner.rows(MARKET_ITEMS)[1]["price"] is None


@pytest.mark.asyncio
async def test_delete_removes_listing_and_all_photos(market, remote_store):
    await market.load()
    entry = await market.create(draft(), photos(3))

    assert await market.delete(entry.id) is True

    assert market.get(entry.id) is None
    assert market.images(entry.id) == []
    assert remote_store.inner.objects(TEST_BUCKET) == {}
    assert remote_store.inner.rows(MARKET_ITEM_IMAGES) == []
    assert entry.id not in [row["id"] for row in remote_store.inner.rows(MARKET_ITEMS)]


@pytest.mark.asyncio
async def test_failed_photo_removal_deletes_nothing(market, remote_store, notifier):
    await market.load()
    entry = await market.create(draft(), photos(3))
    remote_store.fail("remove")

    assert await market.delete(entry.id) is False

    assert market.get(entry.id) is entry
    assert len(remote_store.inner.objects(TEST_BUCKET)) == 3
    assert len(remote_store.inner.rows(MARKET_ITEM_IMAGES)) == 3
    assert entry.id in [row["id"] for row in remote_store.inner.rows(MARKET_ITEMS)]
    assert notifier.history[-1].action == "delete listing"


@pytest.mark.asyncio
async def test_load_images_failure_warns(market, remote_store, notifier):
    await market.load()
    remote_store.fail("select")

    assert await market.load_images("m1") == []
    assert notifier.history[-1].level == NotificationLevel.WARNING


@pytest.mark.asyncio
async def test_toggle_like_on_listing(market, remote_store):
    await market.load()

    entry = market.toggle_like("m1")
    await market.drain()

    assert entry.liked is True
    assert remote_store.inner.rows(MARKET_ITEMS)[0]["likes"] == 1
