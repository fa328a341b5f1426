"""Social media post generator API schemas."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class PostGenerationRequest(BaseModel):
    # Left loose; the generator decides what a bad topic or suggestion means.
    topic: Any = None
    image_suggestion: Any = Field(None, alias="imageSuggestion")
    # Unknown platforms fall back to instagram.
    platform: Optional[str] = None

    class Config:
        populate_by_name = True


class GeneratedPostModel(BaseModel):
    text: str
    image_url: Optional[str] = Field(None, alias="imageUrl")

    class Config:
        populate_by_name = True


class PostGenerationResponse(BaseModel):
    success: bool
    data: Optional[GeneratedPostModel] = None
    error: Optional[str] = None
