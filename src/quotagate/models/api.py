"""
API request and response models.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class GenerateImageRequest(BaseModel):
    """Body of POST /generate_image. The prompt is passed through untouched."""

    prompt: str = Field(description="Free text prompt for the image model")


class GenerateImageResponse(BaseModel):
    """Successful image generation."""

    image_url: str = Field(description="Location of the generated image")
    remaining_calls: Optional[int] = Field(
        default=None,
        description="Remaining uses reported by the verification made before generating",
    )


class ErrorResponse(BaseModel):
    """
    Standard error response model.
    """

    error: str = Field(description="Error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional error details"
    )
