"""Upload endpoint: accept an image (multipart), validate type and size, store, return its URL."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.api.deps import get_upload_service, http_error
from app.api.v1.auth import get_current_user
from app.core.errors import AppError
from app.schemas.upload import UploadResponse
from app.services.policy import Actor
from app.services.upload import UploadService

router = APIRouter()


@router.post("/image", response_model=UploadResponse, status_code=201)
async def upload_image(
    uploads: Annotated[UploadService, Depends(get_upload_service)],
    _user: Annotated[Actor, Depends(get_current_user)],
    file: Annotated[UploadFile | None, File()] = None,
) -> UploadResponse:
    """
    Store an image and return a public URL.

    Send `multipart/form-data` with a field named `file` (jpeg, png, gif or webp).
    Files above UPLOAD_MAX_BYTES are rejected with 400 before reaching storage;
    storage failures return 500.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded.")
    # Reject on declared type before reading the body.
    try:
        uploads.validate(max(file.size or 1, 1), file.content_type)
        data = await file.read(uploads.max_bytes + 1)
        url = await uploads.store(data, file.filename, file.content_type)
    except AppError as e:
        raise http_error(e) from e
    return UploadResponse(url=url)
