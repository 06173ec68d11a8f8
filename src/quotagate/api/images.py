"""
Image generation endpoint.

Main endpoint: POST /generate_image
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from ..core.gateway import Gateway
from ..models import ErrorResponse, GenerateImageRequest, GenerateImageResponse
from .dependencies import get_gateway, get_session_token

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/generate_image",
    response_model=GenerateImageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Malformed, invalid or exhausted API key"},
        401: {"model": ErrorResponse, "description": "No API key in session"},
        500: {"model": ErrorResponse, "description": "Image generation failed"},
        502: {"model": ErrorResponse, "description": "API key could not be verified"},
    },
    summary="Generate an image",
    description="""
    Generate one image from a prompt using the API key stored in the session.

    **Processing:**
    1. Read the API key from the session cookie
    2. Verify the key and its remaining quota with Unkey
    3. Request a single image from OpenAI

    `remaining_calls` is the quota reported by the verification in step 2,
    before this generation was counted.
    """,
)
async def generate_image(
    request: GenerateImageRequest,
    gateway: Gateway = Depends(get_gateway),
    session_token: Optional[str] = Depends(get_session_token),
) -> GenerateImageResponse:
    """Generate an image for an authorized session."""
    result = await gateway.generate_image(session_token, request.prompt)
    return GenerateImageResponse(
        image_url=result.image_url,
        remaining_calls=result.remaining_calls,
    )
