# src/mungori/viewmodels/market.py
"""Marketplace view-model."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

from mungori.schemas.market import (
    ItemStatus,
    ItemType,
    MarketItem,
    MarketItemDraft,
    MarketItemImage,
    MarketItemPatch,
    PendingFile,
)
from mungori.services.images import ImageError, ImagePipeline
from mungori.services.notifications import Notifier
from mungori.store.base import MARKET_ITEMS, Store, StoreError

from .base import LikeableListViewModel, ListEntry

# Configure logger for this module
logger = logging.getLogger(__name__)


class ListingFilter(StrEnum):
    """Tabs of the marketplace list."""

    ALL = "all"
    SELL = "sell"
    FREE = "free"


class MarketViewModel(LikeableListViewModel[MarketItem]):
    """Listings newest first, with their images."""

    table = MARKET_ITEMS
    record_type = MarketItem
    noun = "listing"
    plural = "listings"
    delete_errors = (StoreError, ImageError)

    def __init__(
        self,
        store: Store,
        notifier: Notifier | None = None,
        pipeline: ImagePipeline | None = None,
    ) -> None:
        super().__init__(store, notifier)
        self.pipeline = pipeline or ImagePipeline(store)
        self._images: dict[str, list[MarketItemImage]] = {}

    def filtered(self, kind: ListingFilter | str = ListingFilter.ALL) -> list[ListEntry[MarketItem]]:
        """Return the entries shown under one marketplace tab."""
        kind = ListingFilter(kind)
        if kind == ListingFilter.ALL:
            return self.entries
        return [entry for entry in self._entries if entry.stored.type == kind.value]

    def images(self, item_id: str) -> list[MarketItemImage]:
        """Return the cached images of one listing ordered by ``sort_order``."""
        return list(self._images.get(str(item_id), []))

    async def load_images(self, item_id: str) -> list[MarketItemImage]:
        """Fetch and cache the images of one listing."""
        try:
            images = await self.pipeline.list_for(str(item_id))
        except StoreError as exc:
            logger.warning("Loading images of listing %s failed: %s", item_id, exc)
            self.notifier.warning("load images", "Could not load the listing photos")
            return self.images(item_id)
        self._images[str(item_id)] = images
        self._changed()
        return list(images)

    async def create(
        self,
        draft: MarketItemDraft,
        images: Sequence[PendingFile] = (),
    ) -> ListEntry[MarketItem] | None:
        """Store a listing, then upload its photos in the order given.

        The photo batch is checked before anything is sent; a rejected batch
        creates nothing. A failed upload keeps the listing without photos.
        """
        if not draft.is_complete():
            return None

        if images:
            try:
                self.pipeline.validate(images)
            except ImageError as exc:
                self.notifier.error("attach images", str(exc))
                return None

        entry = await super().create(draft)
        if entry is None or not images:
            return entry

        try:
            attached = await self.pipeline.attach(entry.id, images)
        except ImageError as exc:
            logger.error("Photos of listing %s were not stored: %s", entry.id, exc)
            self.notifier.error("upload images", "The listing was published but its photos failed to upload")
            self._images[entry.id] = []
            return entry

        self._images[entry.id] = attached
        self._changed()
        return entry

    async def attach_images(
        self, item_id: str, files: Sequence[PendingFile]
    ) -> list[MarketItemImage] | None:
        """Append photos to an existing listing after its current ones."""
        entry = self.get(item_id)
        if entry is None:
            return None
        if entry.id not in self._images:
            await self.load_images(entry.id)
        existing = self._images.get(entry.id, [])
        start_index = max((image.sort_order for image in existing), default=-1) + 1

        try:
            self.pipeline.validate(files, existing=len(existing))
            attached = await self.pipeline.attach(entry.id, files, start_index=start_index)
        except ImageError as exc:
            self.notifier.error("upload images", str(exc))
            return None

        self._images[entry.id] = sorted(existing + attached, key=lambda image: image.sort_order)
        self._changed()
        self.notifier.success("upload images", f"{len(attached)} photo(s) added")
        return self.images(entry.id)

    async def set_status(self, item_id: str, status: ItemStatus | str) -> ListEntry[MarketItem] | None:
        return await self.update(item_id, MarketItemPatch(status=ItemStatus(status)))

    def _prepare_patch(self, entry: ListEntry[MarketItem], changes: dict[str, Any]) -> dict[str, Any]:
        merged_type = changes.get("type", entry.stored.type)
        if merged_type == ItemType.FREE and ("price" in changes or "type" in changes):
            changes["price"] = None
        return changes

    async def _delete_dependents(self, entry: ListEntry[MarketItem]) -> None:
        await self.pipeline.purge(entry.id)

    async def delete(self, row_id: str) -> bool:
        deleted = await super().delete(row_id)
        if deleted:
            self._images.pop(str(row_id), None)
        return deleted
