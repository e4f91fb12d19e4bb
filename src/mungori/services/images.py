# src/mungori/services/images.py
"""Image attachments for marketplace items.

Uploads run one at a time in the order the files were picked, and the
metadata rows record that order in ``sort_order``. A failed batch may leave
already-uploaded objects behind in the bucket; nothing cleans them up.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from mungori.core.settings import settings
from mungori.schemas.market import MarketItemImage, PendingFile
from mungori.store.base import MARKET_ITEM_IMAGES, Store, StoreError

# Configure logger for this module
logger = logging.getLogger(__name__)


class ImageError(RuntimeError):
    """Base exception for image attachment failures."""


class TooManyImagesError(ImageError):
    """Raised when a batch would push an item past its image limit."""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"{count} images exceed the limit of {limit} per item")
        self.count = count
        self.limit = limit


class OversizedFileError(ImageError):
    """Raised when one file in a batch is over the size limit."""

    def __init__(self, name: str, size: int, limit: int) -> None:
        super().__init__(f"{name} is {size} bytes; the limit is {limit} bytes")
        self.name = name
        self.size = size
        self.limit = limit


class ImageUploadError(ImageError):
    """Raised when an upload or the metadata insert fails."""


class ImageDeleteError(ImageError):
    """Raised when stored images of an item could not be removed."""


class ImagePipeline:
    """Uploads, lists and purges the images owned by marketplace items."""

    def __init__(
        self,
        store: Store,
        *,
        bucket: str | None = None,
        max_images: int | None = None,
        max_bytes: int | None = None,
    ) -> None:
        self.store = store
        self.bucket = bucket or settings.image_bucket
        self.max_images = max_images or settings.max_images_per_item
        self.max_bytes = max_bytes or settings.max_image_bytes

    def validate(self, files: Sequence[PendingFile], *, existing: int = 0) -> None:
        """Reject the whole batch before any network call.

        Raises:
            TooManyImagesError: If the item would end up with too many images.
            OversizedFileError: For the first file over the size limit.
        """
        total = existing + len(files)
        if total > self.max_images:
            raise TooManyImagesError(total, self.max_images)
        for pending in files:
            if pending.size > self.max_bytes:
                raise OversizedFileError(pending.name, pending.size, self.max_bytes)

    def _object_path(self, owner_id: str, index: int, pending: PendingFile) -> str:
        stamp = time.time_ns() // 1_000_000
        return f"{owner_id}/{stamp}-{index}{pending.extension}"

    async def attach(
        self,
        owner_id: str,
        files: Sequence[PendingFile],
        *,
        start_index: int = 0,
    ) -> list[MarketItemImage]:
        """Upload ``files`` for ``owner_id`` and record them in order.

        Args:
            owner_id: Id of the owning marketplace item.
            files: Pending files in the order the user picked them.
            start_index: ``sort_order`` of the first file; equals the number of
                images the item already has.

        Returns:
            The stored image rows ordered by ``sort_order``.

        Raises:
            TooManyImagesError, OversizedFileError: Before anything is sent.
            ImageUploadError: If any upload or the metadata insert fails.
        """
        self.validate(files, existing=start_index)
        if not files:
            return []

        rows = []
        for offset, pending in enumerate(files):
            sort_order = start_index + offset
            path = self._object_path(owner_id, sort_order, pending)
            try:
                await self.store.upload(
                    self.bucket, path, pending.data, content_type=pending.content_type
                )
            except StoreError as exc:
                logger.warning(
                    "Upload of %s for item %s failed after %d of %d files",
                    pending.name,
                    owner_id,
                    offset,
                    len(files),
                )
                raise ImageUploadError(f"Uploading {pending.name} failed: {exc}") from exc
            rows.append(
                {
                    "market_item_id": owner_id,
                    "url": self.store.get_public_url(self.bucket, path),
                    "path": path,
                    "sort_order": sort_order,
                }
            )

        try:
            inserted = await self.store.insert(MARKET_ITEM_IMAGES, rows)
        except StoreError as exc:
            raise ImageUploadError(f"Recording images for item {owner_id} failed: {exc}") from exc

        images = [MarketItemImage.model_validate(row) for row in inserted]
        return sorted(images, key=lambda image: image.sort_order)

    async def list_for(self, owner_id: str) -> list[MarketItemImage]:
        """Return the images of ``owner_id`` ordered by ``sort_order``."""
        rows = await self.store.select(
            MARKET_ITEM_IMAGES,
            filters={"market_item_id": owner_id},
            order_by="sort_order",
            descending=False,
        )
        return [MarketItemImage.model_validate(row) for row in rows]

    async def purge(self, owner_id: str) -> int:
        """Delete every image of ``owner_id``: objects first, then rows.

        Returns:
            Number of images removed.

        Raises:
            ImageDeleteError: If listing, object removal or a row delete fails.
                Object removal failing leaves every metadata row untouched.
        """
        try:
            images = await self.list_for(owner_id)
        except StoreError as exc:
            raise ImageDeleteError(f"Listing images of item {owner_id} failed: {exc}") from exc
        if not images:
            return 0

        try:
            await self.store.remove(self.bucket, [image.path for image in images])
        except StoreError as exc:
            raise ImageDeleteError(f"Removing stored images of item {owner_id} failed: {exc}") from exc

        for image in images:
            try:
                await self.store.delete(MARKET_ITEM_IMAGES, image.id)
            except StoreError as exc:
                raise ImageDeleteError(f"Deleting image row {image.id} failed: {exc}") from exc

        logger.debug("Purged %d images of item %s", len(images), owner_id)
        return len(images)
