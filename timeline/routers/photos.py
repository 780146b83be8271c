"""
Photos router for the shared feed.
"""
import logging
import mimetypes
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import UploadFile

from timeline.config import get_settings
from timeline.database import get_db
from timeline.dependencies.auth import get_current_user
from timeline.exceptions import PhotoNotFoundError, UploadValidationError
from timeline.models.user import User
from timeline.schemas.photo import PhotoBase, PhotoCreate, PhotoResponse, PhotoUrlCreate, PhotoWithUsername
from timeline.services.photo import PhotoService
from timeline.utils.prometheus_metrics import (
    photo_delete_total,
    photo_like_total,
    photo_upload_file_size_bytes,
    photo_upload_total,
)

logger = logging.getLogger("timeline.photos")

router = APIRouter(prefix="/photos", tags=["Photos"])

# Allowed content types for photo upload
ALLOWED_CONTENT_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/heic",
    "image/heif",
}

# File extension to content type mapping
EXTENSION_TO_CONTENT_TYPE = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

# Client types that say nothing about the file
GENERIC_CONTENT_TYPES = {"", "application/octet-stream"}


def guess_content_type(filename: str, provided_type: Optional[str] = None) -> Optional[str]:
    """
    Resolve the content type of an uploaded file.

    A specific type sent by the client is trusted as-is; the extension is
    only consulted when the client sent nothing or a generic type.

    Args:
        filename: The filename
        provided_type: The content type provided by the client

    Returns:
        The content type, or None if cannot be determined
    """
    provided_type = (provided_type or "").split(";")[0].strip().lower()
    if provided_type not in GENERIC_CONTENT_TYPES:
        return provided_type

    if filename:
        name = filename.lower()
        for ext_key, content_type in EXTENSION_TO_CONTENT_TYPE.items():
            if name.endswith(ext_key):
                return content_type

        guessed_type, _ = mimetypes.guess_type(filename)
        if guessed_type:
            return guessed_type

    return provided_type or None


def _validation_message(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
        for err in error.errors()
    )


async def _read_upload(upload: UploadFile, max_size: int) -> bytes:
    """
    Read an uploaded file, rejecting it once it exceeds max_size.

    Raises:
        UploadValidationError: If the type is not an allowed image type or the file is too large
    """
    content_type = guess_content_type(upload.filename or "", upload.content_type)
    if not content_type or content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadValidationError(
            f"File type not allowed. Allowed types: JPEG, PNG, GIF, WebP, HEIC. "
            f"Provided: {upload.content_type or 'unknown'}"
        )

    content = await upload.read(max_size + 1)
    if len(content) > max_size:
        raise UploadValidationError(
            f"File too large. Maximum size: {max_size // (1024 * 1024)}MB"
        )
    if not content:
        raise UploadValidationError("Uploaded file is empty")
    return content


@router.get(
    "",
    response_model=List[PhotoWithUsername],
    summary="List the shared feed",
)
async def list_photos(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> List[PhotoWithUsername]:
    """
    Get every photo with its uploader's username, in upload order.
    """
    return await PhotoService(db).list_photos()


@router.post(
    "",
    response_model=PhotoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a new photo",
)
async def create_photo(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PhotoResponse:
    """
    Create a photo owned by the current user.

    Two request forms are accepted:

    - `application/json`: `{"image_url": "https://...", "description": "...", "taken_at": null}`
    - `multipart/form-data`: `photo` (file), `description`, optional `taken_at`

    Files must be JPEG, PNG, GIF, WebP or HEIC and at most 5MB.
    Invalid requests are rejected before anything is stored.
    """
    content_type = request.headers.get("content-type", "").lower()
    photo_service = PhotoService(db)

    if content_type.startswith("application/json"):
        try:
            body = await request.json()
            data = PhotoUrlCreate.model_validate(body)
        except ValidationError as e:
            photo_upload_total.labels(upload_method="url", result="rejected").inc()
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_validation_message(e))
        except ValueError:
            # JSONDecodeError, or a body that is not UTF-8
            photo_upload_total.labels(upload_method="url", result="rejected").inc()
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed JSON body")

        photo = await photo_service.create_photo(
            current_user.id,
            PhotoCreate(
                image_url=str(data.image_url),
                description=data.description,
                taken_at=data.taken_at,
            ),
        )
        await db.commit()
        photo_upload_total.labels(upload_method="url", result="success").inc()
        return PhotoResponse.model_validate(photo)

    if content_type.startswith("multipart/form-data"):
        settings = get_settings()
        async with request.form() as form:
            upload = form.get("photo")
            try:
                if not isinstance(upload, UploadFile):
                    raise UploadValidationError("A photo file is required")
                metadata = PhotoBase(
                    description=form.get("description"),
                    taken_at=form.get("taken_at") or None,
                )
                content = await _read_upload(upload, settings.max_upload_size)
            except ValidationError as e:
                photo_upload_total.labels(upload_method="file", result="rejected").inc()
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_validation_message(e))
            except UploadValidationError as e:
                photo_upload_total.labels(upload_method="file", result="rejected").inc()
                logger.warning(
                    "Photo upload rejected",
                    extra={"event": "photo_upload", "user_id": current_user.id, "detail": str(e)},
                )
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

            original_filename = upload.filename or "photo"

        try:
            photo = await photo_service.upload_photo(
                owner_id=current_user.id,
                file_content=content,
                original_filename=original_filename,
                metadata=metadata,
            )
            await db.commit()
        except Exception as e:
            photo_upload_total.labels(upload_method="file", result="failure").inc()
            logger.error("Photo upload failed", exc_info=e, extra={"event": "photo_upload", "user_id": current_user.id})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Photo upload failed. Please try again later.",
            )

        photo_upload_total.labels(upload_method="file", result="success").inc()
        photo_upload_file_size_bytes.observe(len(content))
        return PhotoResponse.model_validate(photo)

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Expected an application/json or multipart/form-data body",
    )


@router.delete(
    "/{photo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a photo",
)
async def delete_photo(
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> None:
    """
    Delete one of the current user's photos.

    Photos that do not exist and photos owned by someone else both answer 404.
    """
    photo_service = PhotoService(db)
    try:
        stored_name = await photo_service.delete_photo(photo_id, current_user.id)
    except PhotoNotFoundError:
        photo_delete_total.labels(result="not_found").inc()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")

    await db.commit()
    # 커밋 이후에만 파일 삭제 (커밋 실패 시 행과 파일 모두 유지)
    await photo_service.remove_stored_file(photo_id, stored_name)
    photo_delete_total.labels(result="success").inc()


@router.post(
    "/{photo_id}/like",
    response_model=PhotoResponse,
    summary="Like a photo",
)
async def like_photo(
    photo_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> PhotoResponse:
    """
    Add one like to any photo in the feed and return the updated photo.
    """
    try:
        photo = await PhotoService(db).like_photo(photo_id)
    except PhotoNotFoundError:
        photo_like_total.labels(result="not_found").inc()
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Photo not found")

    await db.commit()
    photo_like_total.labels(result="success").inc()
    return PhotoResponse.model_validate(photo)
