"""Wallet endpoints, mounted only when the wallet is enabled."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request

from kiosk_print.api.request_models import RechargeRequest
from kiosk_print.services.validation import parse_uuid

if TYPE_CHECKING:
    from kiosk_print.containers import AppContainer

router = APIRouter(prefix="/api/wallet", tags=["wallet"])


@router.get("")
def wallet_by_query(
    request: Request, user_id: str | None = Query(default=None, alias="userId")
) -> dict[str, object]:
    """Return balance and history, with the user id in the query string."""
    container: AppContainer = request.app.state.container
    summary = container.wallet_service.summary(parse_uuid(user_id, "userId"))
    return {"success": True, **summary.view()}


@router.get("/{user_id}")
def wallet(user_id: str, request: Request) -> dict[str, object]:
    """Return balance and history for a user."""
    container: AppContainer = request.app.state.container
    summary = container.wallet_service.summary(parse_uuid(user_id, "userId"))
    return {"success": True, **summary.view()}


@router.post("/recharge")
def recharge(body: RechargeRequest, request: Request) -> dict[str, object]:
    """Credit a user's wallet."""
    container: AppContainer = request.app.state.container
    summary = container.wallet_service.recharge(
        parse_uuid(body.user_id, "userId"), body.amount
    )
    view = summary.view()
    return {"success": True, "newBalance": view["balance"], "history": view["history"]}
