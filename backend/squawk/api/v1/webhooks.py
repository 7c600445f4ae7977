"""Billing provider webhook, authenticated with "Authorization: ApiKey <key>"."""

import hmac
import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from squawk.api.deps import get_settings, get_store
from squawk.config import Settings
from squawk.core.bearer import HeaderProblem, get_api_key
from squawk.schemas.auth import WebhookBody
from squawk.storage.sql_store import SqlUserStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/webhooks", tags=["webhooks"])

UPGRADE_EVENT = "user.upgraded"


def require_webhook_key(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    result = get_api_key(request.headers)
    if isinstance(result, HeaderProblem):
        logger.info("Webhook rejected: %s", result.kind.value)
        raise HTTPException(status_code=401, detail="Invalid API key")
    expected = settings.webhook_api_key
    if not expected or not hmac.compare_digest(result.value.encode(), expected.encode()):
        logger.warning("Webhook rejected: API key mismatch")
        raise HTTPException(status_code=401, detail="Invalid API key")


@router.post(
    "/billing",
    status_code=204,
    summary="Billing events (user upgrades)",
    responses={
        400: {"description": "Invalid user id"},
        401: {"description": "Missing or wrong API key"},
        404: {"description": "User not found"},
    },
    dependencies=[Depends(require_webhook_key)],
)
async def billing_webhook(
    store: Annotated[SqlUserStore, Depends(get_store)],
    body: WebhookBody,
) -> Response:
    """Unknown events are acknowledged and ignored."""
    if body.event != UPGRADE_EVENT:
        return Response(status_code=204)
    try:
        user_id = uuid.UUID(body.data.user_id)
    except ValueError as e:
        logger.info("Webhook with invalid user id %r", body.data.user_id)
        raise HTTPException(status_code=400, detail="Invalid user id") from e
    user = await store.upgrade_user_to_premium(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("User %s upgraded to premium", user_id)
    return Response(status_code=204)
