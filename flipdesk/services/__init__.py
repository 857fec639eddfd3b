"""
Application services module.
"""

from flipdesk.services.email import EmailService, get_email_service
from flipdesk.services.storage import (
    LocalPhotoStorage,
    PhotoStorage,
    S3PhotoStorage,
    StorageError,
    get_photo_storage,
)

__all__ = [
    "EmailService",
    "get_email_service",
    "LocalPhotoStorage",
    "PhotoStorage",
    "S3PhotoStorage",
    "StorageError",
    "get_photo_storage",
]
