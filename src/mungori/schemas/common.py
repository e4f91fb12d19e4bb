# src/mungori/schemas/common.py
"""Shared Pydantic bases for stored records and client drafts."""
from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator


class StoredRecord(BaseModel):
    """A row as the store returns it.

    Records never carry an author identifier; anonymity comes from never
    persisting one.
    """

    id: str
    created_at: datetime

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        # The store may hand back integer or uuid keys.
        if value is None:
            return value
        return str(value)

    def to_row(self) -> dict[str, Any]:
        """Return the JSON-ready row payload using the store's column names."""
        return self.model_dump(mode="json", by_alias=True)


class Draft(BaseModel):
    """Text a user typed into a create form.

    Drafts accept blank input; view-models check :meth:`is_complete` and turn
    an incomplete draft into a no-op rather than an error.
    """

    required_fields: ClassVar[tuple[str, ...]] = ()

    def is_complete(self) -> bool:
        """Return True when every required text field has non-blank content."""
        for name in self.required_fields:
            value = getattr(self, name, None)
            if not isinstance(value, str) or not value.strip():
                return False
        return True
