"""
Services package.
Contains business logic and the local file storage integration.
"""
from timeline.services.storage import LocalFileStorage
from timeline.services.auth import AuthService
from timeline.services.photo import PhotoService

__all__ = [
    "LocalFileStorage",
    "AuthService",
    "PhotoService",
]
