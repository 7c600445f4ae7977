"""Auth: login, refresh, revoke."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from squawk.api.deps import client_ip, get_session_service, malformed_header
from squawk.core.errors import AuthenticationDenied, EntropyError, MalformedCredential
from squawk.db.session import get_db
from squawk.schemas.auth import AccessTokenResponse, LoginBody, TokenResponse, UserOut
from squawk.services.audit import log_action
from squawk.services.sessions import SessionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

LOGIN_DENIED = "Incorrect email or password"
REFRESH_DENIED = "Invalid, expired, or revoked refresh token"


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login with email and password",
    responses={
        401: {"description": "Incorrect email or password"},
        500: {"description": "Token issuance failed"},
    },
)
async def login(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[SessionService, Depends(get_session_service)],
    body: LoginBody,
) -> TokenResponse:
    try:
        result = await service.login(body.email, body.password, body.expires_in_seconds)
    except AuthenticationDenied as e:
        logger.info("Login denied: %s", e.reason)
        await log_action(session, None, "login_failed", details={"reason": e.reason}, ip_address=client_ip(request))
        raise HTTPException(status_code=401, detail=LOGIN_DENIED) from e
    except EntropyError as e:
        logger.exception("Login failed to mint refresh token: %s", e)
        raise HTTPException(status_code=500, detail="Login failed") from e
    await log_action(session, result.user.id, "login", ip_address=client_ip(request))
    return TokenResponse(
        access_token=result.access.token,
        refresh_token=result.refresh_token,
        expires_in=result.access.expires_in,
        user=UserOut.model_validate(result.user, from_attributes=True),
    )


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    summary="Exchange a refresh token (Authorization: Bearer) for a new access token",
    responses={
        400: {"description": "Authorization header missing or malformed"},
        401: {"description": "Refresh token invalid, expired or revoked"},
    },
)
async def refresh(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[SessionService, Depends(get_session_service)],
) -> AccessTokenResponse:
    """The refresh token is not rotated; it stays valid until revoked or expired."""
    try:
        user, access = await service.refresh(request.headers)
    except MalformedCredential as e:
        raise malformed_header(e) from e
    except AuthenticationDenied as e:
        logger.info("Refresh denied: %s", e.reason)
        raise HTTPException(status_code=401, detail=REFRESH_DENIED) from e
    await log_action(session, user.id, "refresh", ip_address=client_ip(request))
    return AccessTokenResponse(access_token=access.token, expires_in=access.expires_in)


@router.post(
    "/revoke",
    status_code=204,
    summary="Revoke a refresh token (Authorization: Bearer)",
    responses={
        400: {"description": "Authorization header missing or malformed"},
        401: {"description": "Unknown refresh token"},
    },
)
async def revoke(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[SessionService, Depends(get_session_service)],
) -> Response:
    try:
        await service.revoke(request.headers)
    except MalformedCredential as e:
        raise malformed_header(e) from e
    except AuthenticationDenied as e:
        logger.info("Revoke denied: %s", e.reason)
        raise HTTPException(status_code=401, detail=REFRESH_DENIED) from e
    await log_action(session, None, "revoke", ip_address=client_ip(request))
    return Response(status_code=204)
