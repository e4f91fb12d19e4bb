# src/mungori/schemas/post.py
"""Community board schemas."""

from enum import StrEnum
from typing import Any, ClassVar

from pydantic import Field

from .common import Draft, StoredRecord


class PostCategory(StrEnum):
    """Closed set of board categories."""

    QUESTION = "question"
    CHITCHAT = "chitchat"
    CONCERN = "concern"
    INFO = "info"
    OTHER = "other"


class Post(StoredRecord):
    """Anonymous board post."""

    content: str
    category: PostCategory
    likes: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)


class PostDraft(Draft):
    """Schema for a post typed into the compose dialog."""

    required_fields: ClassVar[tuple[str, ...]] = ("content",)

    content: str = ""
    category: PostCategory = PostCategory.QUESTION

    def to_insert_row(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "category": self.category.value,
            "likes": 0,
            "comments": 0,
        }
