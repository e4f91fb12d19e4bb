# src/mungori/viewmodels/posts.py
"""Community board view-model."""

from mungori.schemas.post import Post
from mungori.store.base import POSTS

from .base import LikeableListViewModel


class PostsViewModel(LikeableListViewModel[Post]):
    """Anonymous posts, newest first."""

    table = POSTS
    record_type = Post
    noun = "post"
    plural = "posts"
