"""
Database models package.
All models are exported here for easy import.
"""
from timeline.models.user import User
from timeline.models.photo import Photo

__all__ = ["User", "Photo"]
