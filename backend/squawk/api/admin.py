"""Development-only maintenance endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from squawk.api.deps import get_settings, get_store
from squawk.config import Settings
from squawk.storage.sql_store import SqlUserStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/reset",
    summary="Delete all users and refresh tokens (dev platform only)",
    responses={403: {"description": "Only available when PLATFORM=dev"}},
)
async def reset(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[SqlUserStore, Depends(get_store)],
) -> dict:
    if not settings.is_dev_platform:
        raise HTTPException(status_code=403, detail="Reset is only available on the dev platform")
    await store.delete_users()
    logger.warning("All users and refresh tokens deleted")
    return {"ok": True}
