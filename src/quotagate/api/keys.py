"""
Key endpoints.

- GET /me: credential held by the current session
- POST /authorize: issue a new credential into the session
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from ..config import Settings
from ..core.gateway import Gateway
from ..models import Credential, ErrorResponse
from .dependencies import get_app_settings, get_gateway, get_session_token

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "/me",
    response_model=Credential,
    responses={
        401: {"model": ErrorResponse, "description": "No API key in session"},
    },
    summary="Current API key",
)
async def read_current_key(
    gateway: Gateway = Depends(get_gateway),
    session_token: Optional[str] = Depends(get_session_token),
) -> Credential:
    """Return the key and key id stored in the session cookie."""
    return gateway.inspect(session_token)


@router.post(
    "/authorize",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Key issued, redirect to /me"},
        401: {"model": ErrorResponse, "description": "Key issuance failed"},
    },
    summary="Issue an API key",
    description="""
    Create a new quota-limited API key and store it in an HTTP-only
    session cookie.

    Calling this again issues another key which replaces the one in the
    session; the previous key is no longer reachable through /me.
    """,
)
async def authorize(
    request: Request,
    gateway: Gateway = Depends(get_gateway),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """Issue a key and redirect to /me."""
    result = await gateway.authorize()

    response = RedirectResponse(
        url=request.app.url_path_for("read_current_key"),
        status_code=status.HTTP_303_SEE_OTHER,
    )
    response.set_cookie(
        key=settings.session.cookie_name,
        value=result.session_token,
        max_age=settings.session.max_age_seconds,
        httponly=True,
        secure=settings.session.secure,
        samesite="lax",
    )

    logger.info("Session authorized", key_id=result.credential.identifier)
    return response
