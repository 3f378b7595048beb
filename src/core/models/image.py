"""Shared image geometry and transform result models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, StrictBytes, StrictStr

from core.utils.constants import TARGET_HEIGHT, TARGET_WIDTH


class TargetGeometry(BaseModel):
    """Output canvas for the compress-and-copy operation."""

    model_config = ConfigDict(frozen=True)

    width: PositiveInt = Field(TARGET_WIDTH, description="Output width in pixels")
    height: PositiveInt = Field(TARGET_HEIGHT, description="Output height in pixels")
    fit: Literal["cover"] = "cover"
    anchor: Literal["center"] = "center"

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


TARGET_GEOMETRY = TargetGeometry()


class TransformResult(BaseModel):
    """Encoded output of an image transform."""

    model_config = ConfigDict(frozen=True)

    content: StrictBytes = Field(..., description="Encoded image bytes")
    mime_type: StrictStr = Field(..., description="MIME type of the encoded image")
    source_format: StrictStr | None = Field(
        None, description="Format detected from the input bytes (e.g. PNG)"
    )
