# src/mungori/schemas/market.py
"""Marketplace schemas: items, their images and pending uploads."""

from __future__ import annotations

import os
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import Draft, StoredRecord


class MarketCategory(StrEnum):
    """Closed set of marketplace categories."""

    BOOKS = "books"
    ELECTRONICS = "electronics"
    STATIONERY = "stationery"
    HOUSEHOLD = "household"
    OTHER = "other"


class ItemType(StrEnum):
    SELL = "sell"
    FREE = "free"


class ItemStatus(StrEnum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    COMPLETED = "completed"


def _normalize_price(item_type: ItemType | None, price: str | None) -> str | None:
    if item_type == ItemType.FREE:
        return None
    if price is None or not price.strip():
        return None
    return price.strip()


class MarketItem(StoredRecord):
    """Item offered for sale or given away.

    A free item never carries a price, whatever the row says.
    """

    title: str
    description: str
    category: MarketCategory
    type: ItemType
    price: str | None = None
    status: ItemStatus = ItemStatus.AVAILABLE
    likes: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _free_items_have_no_price(self) -> MarketItem:
        normalized = _normalize_price(self.type, self.price)
        if normalized != self.price:
            self.price = normalized
        return self


class MarketItemDraft(Draft):
    """Schema for a listing typed into the create dialog."""

    required_fields: ClassVar[tuple[str, ...]] = ("title", "description")

    title: str = ""
    description: str = ""
    category: MarketCategory = MarketCategory.BOOKS
    type: ItemType = ItemType.FREE
    price: str | None = None

    @model_validator(mode="after")
    def _drop_price_for_free_items(self) -> MarketItemDraft:
        normalized = _normalize_price(self.type, self.price)
        if normalized != self.price:
            self.price = normalized
        return self

    def to_insert_row(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "category": self.category.value,
            "type": self.type.value,
            "price": self.price,
            "status": ItemStatus.AVAILABLE.value,
            "likes": 0,
        }


class MarketItemPatch(BaseModel):
    """Partial update of a listing; only explicitly set fields are sent."""

    title: str | None = None
    description: str | None = None
    category: MarketCategory | None = None
    type: ItemType | None = None
    price: str | None = None
    status: ItemStatus | None = None

    def changes(self) -> dict[str, Any]:
        """Return the JSON-ready patch, enforcing the free/price exclusion."""
        data = self.model_dump(mode="json", exclude_unset=True)
        if data.get("type") == ItemType.FREE.value:
            data["price"] = None
        elif "price" in data:
            data["price"] = _normalize_price(self.type, self.price)
        return data


class MarketItemImage(StoredRecord):
    """Metadata row pointing at one uploaded image of an item."""

    market_item_id: str
    url: str
    path: str
    sort_order: int = Field(ge=0)

    @field_validator("market_item_id", mode="before")
    @classmethod
    def _stringify_owner(cls, value: Any) -> Any:
        return str(value) if value is not None else value


class PendingFile(BaseModel):
    """A local file selected for upload but not yet sent."""

    name: str
    data: bytes
    content_type: str = "application/octet-stream"

    model_config = ConfigDict(frozen=True)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        return os.path.splitext(self.name)[1].lower()
