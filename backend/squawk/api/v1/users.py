"""User endpoints: register, update credentials, current profile."""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from squawk.api.deps import get_current_user_id, get_session_service, get_store
from squawk.core.errors import EmailAlreadyRegistered, HashingError, UserNotFound
from squawk.schemas.auth import UserCredentialsBody, UserOut
from squawk.services.sessions import SessionService
from squawk.storage.sql_store import SqlUserStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    status_code=201,
    response_model=UserOut,
    summary="Register a new user",
    responses={
        409: {"description": "Email already registered"},
        500: {"description": "Password hashing failed"},
    },
)
async def register(
    service: Annotated[SessionService, Depends(get_session_service)],
    body: UserCredentialsBody,
) -> UserOut:
    try:
        user = await service.register(body.email, body.password)
    except EmailAlreadyRegistered as e:
        raise HTTPException(status_code=409, detail="Email already registered") from e
    except HashingError as e:
        logger.exception("Register failed: %s", e)
        raise HTTPException(status_code=500, detail="Registration failed") from e
    return UserOut.model_validate(user, from_attributes=True)


@router.put(
    "",
    response_model=UserOut,
    summary="Change email and password of the current user",
    responses={
        401: {"description": "Not authenticated or invalid token"},
        409: {"description": "Email already registered"},
    },
)
async def update_credentials(
    user_id: Annotated[uuid.UUID, Depends(get_current_user_id)],
    service: Annotated[SessionService, Depends(get_session_service)],
    body: UserCredentialsBody,
) -> UserOut:
    try:
        user = await service.update_credentials(user_id, body.email, body.password)
    except UserNotFound as e:
        raise HTTPException(status_code=401, detail="Invalid token") from e
    except EmailAlreadyRegistered as e:
        raise HTTPException(status_code=409, detail="Email already registered") from e
    except HashingError as e:
        logger.exception("Credential update failed: %s", e)
        raise HTTPException(status_code=500, detail="Update failed") from e
    return UserOut.model_validate(user, from_attributes=True)


@router.get(
    "/me",
    response_model=UserOut,
    summary="Get current authenticated user",
    responses={401: {"description": "Not authenticated or invalid token"}},
)
async def me(
    user_id: Annotated[uuid.UUID, Depends(get_current_user_id)],
    store: Annotated[SqlUserStore, Depends(get_store)],
) -> UserOut:
    user = await store.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid token")
    return UserOut.model_validate(user, from_attributes=True)
