"""Admin login, logout and session status endpoints."""
from fastapi import APIRouter, Depends, Request

from .. import auth
from ..dependencies import get_settings
from ..schemas import AuthStatusModel, LoginRequest, MessageModel
from ..settings import CatalogSettings

router = APIRouter(prefix="/api", tags=["session"])


@router.post("/login", response_model=MessageModel)
def login(
    credentials: LoginRequest,
    request: Request,
    settings: CatalogSettings = Depends(get_settings),
) -> MessageModel:
    """Start an admin session when the credentials match."""

    auth.login(request, settings, credentials.email, credentials.password)
    return MessageModel(message="Login successful")


@router.get("/logout", response_model=MessageModel)
def logout(request: Request) -> MessageModel:
    """Destroy the current session."""

    auth.logout(request)
    return MessageModel(message="Logged out")


@router.get("/auth-status", response_model=AuthStatusModel)
def auth_status(request: Request) -> AuthStatusModel:
    """Report whether the current session is logged in."""

    return AuthStatusModel(logged_in=auth.is_logged_in(request))
