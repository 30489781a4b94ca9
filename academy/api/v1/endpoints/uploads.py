# academy/api/v1/endpoints/uploads.py
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from academy.core.config import settings
from academy.core.security import get_current_user
from academy.models.user import User
from academy.schemas.upload import UploadPublic
from academy.services.uploads import ALLOWED_CONTENT_TYPES, Uploader, UploadError, get_uploader

router = APIRouter(prefix="/uploads", tags=["uploads"])


def _upload_error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


@router.post("", response_model=UploadPublic, status_code=status.HTTP_201_CREATED)
def upload_photo(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    uploader: Uploader = Depends(get_uploader),
):
    """
    Store one photo and return its public URL, to be sent later in
    ``photoUrls`` of a reservation.
    """
    if file.content_type not in ALLOWED_CONTENT_TYPES:
        raise _upload_error(400, "unsupported_media_type", "Only image uploads are accepted.")

    data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if not data:
        raise _upload_error(400, "empty_file", "The uploaded file is empty.")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise _upload_error(400, "file_too_large", "The uploaded file is too large.")

    try:
        url = uploader.store(data, content_type=file.content_type, filename=file.filename)
    except UploadError:
        raise _upload_error(
            status.HTTP_502_BAD_GATEWAY, "upload_unavailable", "Photo storage is unavailable."
        )
    return UploadPublic(url=url)
