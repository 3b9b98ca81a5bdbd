"""Request/response schemas for the upload endpoint."""

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response after successfully storing an image."""

    url: str = Field(
        ...,
        min_length=1,
        description="Publicly dereferenceable URL of the stored image.",
    )
