"""FastAPI dependencies: settings, store, session service, current user."""

import logging
import uuid
from datetime import timedelta
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from squawk.config import Settings
from squawk.core.bearer import HeaderErrorKind
from squawk.core.errors import AuthenticationDenied, MalformedCredential
from squawk.core.passwords import PasswordHasher
from squawk.core.refresh_tokens import RefreshTokenManager
from squawk.core.tokens import AccessTokenCodec
from squawk.db.session import get_db
from squawk.services.sessions import SessionService
from squawk.storage.sql_store import SqlUserStore

logger = logging.getLogger(__name__)

HEADER_ERROR_DETAILS = {
    HeaderErrorKind.MISSING.value: "Authorization header required",
    HeaderErrorKind.MALFORMED.value: "Malformed Authorization header",
}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(session: Annotated[AsyncSession, Depends(get_db)]) -> SqlUserStore:
    return SqlUserStore(session)


def get_session_service(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[SqlUserStore, Depends(get_store)],
) -> SessionService:
    return SessionService(
        store=store,
        hasher=request.app.state.password_hasher,
        codec=AccessTokenCodec(
            settings.secret_key,
            issuer=settings.jwt_issuer,
            algorithm=settings.jwt_algorithm,
            max_ttl=timedelta(seconds=settings.access_token_expire_seconds),
        ),
        refresh_manager=RefreshTokenManager(store, timedelta(days=settings.refresh_token_expire_days)),
    )


def malformed_header(e: MalformedCredential) -> HTTPException:
    return HTTPException(status_code=400, detail=HEADER_ERROR_DETAILS.get(e.reason, "Bad request"))


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


async def get_current_user_id(
    request: Request,
    service: Annotated[SessionService, Depends(get_session_service)],
) -> uuid.UUID:
    try:
        return service.authenticate(request.headers)
    except MalformedCredential as e:
        raise malformed_header(e) from e
    except AuthenticationDenied as e:
        logger.info("Access token rejected: %s", e.reason)
        raise HTTPException(status_code=401, detail="Invalid token") from e
