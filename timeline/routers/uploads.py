"""
Serves uploaded photo files from local storage.
"""
import mimetypes

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from timeline.exceptions import InvalidFilenameError
from timeline.services.storage import get_storage_service

router = APIRouter(prefix="/uploads", tags=["Uploads"])


@router.get(
    "/{filename}",
    summary="Raw image bytes for an uploaded photo",
)
async def get_upload(filename: str) -> Response:
    """
    Return a stored image file.

    Public so that `<img src="/uploads/...">` works without a bearer token;
    stored names are random.
    """
    try:
        content = await get_storage_service().read(filename)
    except (FileNotFoundError, InvalidFilenameError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    media_type, _ = mimetypes.guess_type(filename)
    return Response(
        content=content,
        media_type=media_type or "application/octet-stream",
        headers={"Cache-Control": "public, max-age=3600"},
    )
