"""Registration and login endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from kiosk_print.api.request_models import LoginRequest, RegisterRequest

if TYPE_CHECKING:
    from kiosk_print.containers import AppContainer

router = APIRouter(prefix="/api", tags=["accounts"])


@router.post("/register")
def register(body: RegisterRequest, request: Request) -> dict[str, object]:
    """Create a user or kiosk account."""
    container: AppContainer = request.app.state.container
    account = container.identity_service.register(
        role=body.type,
        credential_name=body.credential_name,
        secret=body.secret,
        location=body.location,
    )
    return {"success": True, "id": str(account.id)}


@router.post("/login")
def login(body: LoginRequest, request: Request) -> dict[str, object]:
    """Check credentials and return the public account view."""
    container: AppContainer = request.app.state.container
    account = container.identity_service.authenticate(
        role=body.type,
        credential_name=body.credential_name,
        secret=body.secret,
    )
    return {"success": True, "account": account.public_view()}
