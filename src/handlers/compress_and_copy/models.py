"""Pydantic models for compress-and-copy request/response."""

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class CompressRequest(BaseModel):
    """Validation model for compress-and-copy request."""

    model_config = ConfigDict(extra="ignore")

    path: StrictStr | None = Field(
        None,
        description="Source image path relative to the storage root, without leading slash",
    )


class CompressResponse(BaseModel):
    """Response model for a successful compress-and-copy."""

    ok: StrictBool = Field(True, description="Always true on success")
    source: StrictStr = Field(..., description="Absolute path of the original image")
    compressed: StrictStr = Field(..., description="Absolute path of the compressed copy")
