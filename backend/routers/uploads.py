"""Reference photo uploads."""
from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel

from routers.common import raise_for_default
from studio import StudioData, get_studio

router = APIRouter(prefix="/uploads", tags=["uploads"])


class UploadResponse(BaseModel):
    url: str


@router.post("/", response_model=UploadResponse)
async def upload_reference_photo(
    file: UploadFile = File(...),
    path: str = Form(..., description="Folder inside the reference-photos bucket"),
    studio: StudioData = Depends(get_studio),
):
    """Store a reference photo and return its public URL."""
    content = await file.read()
    url = await studio.upload_image(
        file.filename or "upload", content, path, content_type=file.content_type
    )
    if url is None:
        raise_for_default(studio, "Failed to upload image")
    return UploadResponse(url=url)
