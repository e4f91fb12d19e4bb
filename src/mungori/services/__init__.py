# src/mungori/services/__init__.py
"""Supporting services for the community view-models."""

from .images import (
    ImageDeleteError,
    ImageError,
    ImagePipeline,
    ImageUploadError,
    OversizedFileError,
    TooManyImagesError,
)
from .notifications import Notification, NotificationLevel, Notifier

__all__ = [
    "ImageDeleteError",
    "ImageError",
    "ImagePipeline",
    "ImageUploadError",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "OversizedFileError",
    "TooManyImagesError",
]
