"""
Domain exceptions raised by services and translated to HTTP responses by routers.
"""


class TimelineError(Exception):
    """Base class for School Timeline domain errors."""


class PhotoNotFoundError(TimelineError):
    """Photo does not exist or is not owned by the requester."""

    def __init__(self, photo_id: int):
        self.photo_id = photo_id
        super().__init__("Photo not found")


class UsernameTakenError(TimelineError):
    """Registration attempted with an existing username."""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already taken")


class UploadValidationError(TimelineError):
    """Upload payload rejected before anything is persisted."""


class InvalidFilenameError(TimelineError):
    """Stored file name is not a plain file name inside the upload directory."""
