"""
Photo service for the shared feed.
"""
import logging
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from timeline.exceptions import PhotoNotFoundError
from timeline.models.photo import Photo
from timeline.models.user import User
from timeline.schemas.photo import PhotoBase, PhotoCreate, PhotoResponse, PhotoWithUsername
from timeline.services.storage import get_storage_service

logger = logging.getLogger("timeline.photo")

UPLOADS_URL_PREFIX = "/uploads"


class PhotoService:
    """
    Service for handling photo operations.
    Rows live in the database; uploaded files live in local storage.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.storage = get_storage_service()

    async def list_photos(self) -> List[PhotoWithUsername]:
        """
        Get every photo with its uploader's username, oldest first.
        """
        result = await self.db.execute(
            select(Photo, User.username)
            .join(User, Photo.user_id == User.id)
            .order_by(Photo.id)
        )
        return [
            PhotoWithUsername(**PhotoResponse.model_validate(photo).model_dump(), username=username)
            for photo, username in result.all()
        ]

    async def create_photo(self, owner_id: int, data: PhotoCreate) -> Photo:
        """
        Insert a photo owned by owner_id with zero likes.

        Args:
            owner_id: ID of the authenticated uploader
            data: Validated photo fields

        Returns:
            Created Photo model
        """
        photo = Photo(
            user_id=owner_id,
            filename=data.filename,
            image_url=data.image_url,
            description=data.description,
            taken_at=data.taken_at,
            likes=0,
        )
        self.db.add(photo)
        await self.db.flush()
        await self.db.refresh(photo)
        logger.info("Photo created", extra={"event": "photo", "photo_id": photo.id, "user_id": owner_id})
        return photo

    async def upload_photo(
        self,
        owner_id: int,
        file_content: bytes,
        original_filename: str,
        metadata: PhotoBase,
    ) -> Photo:
        """
        Store an uploaded file and create its photo row.

        The stored file is removed again if the row cannot be written.
        """
        stored_name = await self.storage.save(file_content, original_filename)
        data = PhotoCreate(
            description=metadata.description,
            taken_at=metadata.taken_at,
            filename=stored_name,
            image_url=f"{UPLOADS_URL_PREFIX}/{stored_name}",
        )
        try:
            return await self.create_photo(owner_id, data)
        except Exception:
            await self.storage.delete(stored_name)
            raise

    async def delete_photo(self, photo_id: int, requester_id: int) -> Optional[str]:
        """
        Delete a photo row owned by requester_id.

        The stored file is left in place; pass the returned name to
        remove_stored_file once the transaction has committed.

        Returns:
            The stored file name, or None for photos that point at an external URL

        Raises:
            PhotoNotFoundError: If the photo is missing or owned by someone else
        """
        result = await self.db.execute(
            select(Photo).where(Photo.id == photo_id, Photo.user_id == requester_id)
        )
        photo = result.scalar_one_or_none()
        if photo is None:
            raise PhotoNotFoundError(photo_id)

        stored_name = photo.filename
        await self.db.delete(photo)
        await self.db.flush()
        logger.info("Photo deleted", extra={"event": "photo", "photo_id": photo_id, "user_id": requester_id})
        return stored_name

    async def remove_stored_file(self, photo_id: int, stored_name: Optional[str]) -> None:
        """Remove a deleted photo's file. Failures are logged, not raised."""
        if stored_name:
            try:
                await self.storage.delete(stored_name)
            except Exception as e:
                # 파일 삭제 실패해도 DB에서는 삭제 (고아 파일 허용)
                logger.error(
                    "Photo file delete failed",
                    exc_info=e,
                    extra={"event": "storage", "photo_id": photo_id},
                )

    async def like_photo(self, photo_id: int) -> Photo:
        """
        Increment a photo's like counter by one.

        The increment is evaluated by the database so concurrent likes
        never overwrite each other.

        Raises:
            PhotoNotFoundError: If the photo does not exist
        """
        result = await self.db.execute(
            update(Photo)
            .where(Photo.id == photo_id)
            .values(likes=Photo.likes + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise PhotoNotFoundError(photo_id)

        refreshed = await self.db.execute(
            select(Photo)
            .where(Photo.id == photo_id)
            .execution_options(populate_existing=True)
        )
        return refreshed.scalar_one()
