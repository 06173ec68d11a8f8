"""
Shared FastAPI dependencies.
"""

from typing import Optional

from fastapi import Depends, Request

from ..config import Settings
from ..core.gateway import Gateway


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_gateway(request: Request) -> Gateway:
    """Gateway built during application startup."""
    return request.app.state.gateway


def get_session_token(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> Optional[str]:
    """Raw session token from the request cookie, if any."""
    return request.cookies.get(settings.session.cookie_name)
