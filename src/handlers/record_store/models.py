"""Pydantic models for record-store responses."""

from typing import Any

from pydantic import BaseModel, Field, StrictBool


class RecordStoreResponse(BaseModel):
    """Response model for a successful record update."""

    success: StrictBool = Field(True, description="Always true on success")
    data: dict[str, Any] = Field(..., description="The merged record as stored")
