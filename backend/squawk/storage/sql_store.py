"""SQLAlchemy implementation of the user / refresh token store.

Each write commits before returning, so a revoked token is invisible to the
very next lookup on any connection.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from squawk.core.errors import EmailAlreadyRegistered, UserNotFound
from squawk.models.audit_log import AuditLog
from squawk.models.refresh_token import RefreshToken
from squawk.models.user import User
from squawk.storage.interfaces import AbstractUserStore, RefreshTokenRecord, UserRecord

logger = logging.getLogger(__name__)


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        hashed_password=user.hashed_password,
        is_premium=user.is_premium,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


class SqlUserStore(AbstractUserStore):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_user(self, email: str, hashed_password: str) -> UserRecord:
        now = datetime.now(timezone.utc)
        user = User(email=email, hashed_password=hashed_password, created_at=now, updated_at=now)
        self._session.add(user)
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            logger.warning("create_user IntegrityError: %s", e)
            raise EmailAlreadyRegistered(email) from e
        return _to_record(user)

    async def update_user(self, user_id: uuid.UUID, email: str, hashed_password: str) -> UserRecord:
        user = await self._session.get(User, user_id)
        if user is None:
            raise UserNotFound(str(user_id))
        user.email = email
        user.hashed_password = hashed_password
        user.updated_at = datetime.now(timezone.utc)
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise EmailAlreadyRegistered(email) from e
        return _to_record(user)

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        r = await self._session.execute(
            select(User).where(User.email == email).execution_options(populate_existing=True)
        )
        user = r.scalar_one_or_none()
        return _to_record(user) if user else None

    async def get_user_by_id(self, user_id: uuid.UUID) -> UserRecord | None:
        user = await self._session.get(User, user_id, populate_existing=True)
        return _to_record(user) if user else None

    async def upgrade_user_to_premium(self, user_id: uuid.UUID) -> UserRecord | None:
        user = await self._session.get(User, user_id)
        if user is None:
            return None
        user.is_premium = True
        user.updated_at = datetime.now(timezone.utc)
        await self._session.commit()
        return _to_record(user)

    async def create_refresh_token(self, record: RefreshTokenRecord) -> None:
        self._session.add(
            RefreshToken(
                token=record.token,
                user_id=record.user_id,
                created_at=record.created_at,
                updated_at=record.updated_at,
                expires_at=record.expires_at,
                revoked_at=record.revoked_at,
            )
        )
        await self._session.commit()

    async def get_user_by_valid_refresh_token(self, token: str, now: datetime) -> UserRecord | None:
        r = await self._session.execute(
            select(User)
            .join(RefreshToken, RefreshToken.user_id == User.id)
            .where(
                RefreshToken.token == token,
                RefreshToken.expires_at > now,
                RefreshToken.revoked_at.is_(None),
            )
        )
        user = r.scalar_one_or_none()
        return _to_record(user) if user else None

    async def revoke_refresh_token(self, token: str, now: datetime) -> bool:
        result = await self._session.execute(
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
            .values(revoked_at=now, updated_at=now)
        )
        if result.rowcount:
            await self._session.commit()
            return True
        # Already revoked counts as found; only unknown tokens are reported.
        r = await self._session.execute(select(RefreshToken.token).where(RefreshToken.token == token))
        found = r.scalar_one_or_none() is not None
        await self._session.commit()
        return found

    async def delete_refresh_tokens(self) -> None:
        await self._session.execute(delete(RefreshToken))
        await self._session.commit()

    async def delete_users(self) -> None:
        await self.delete_refresh_tokens()
        await self._session.execute(update(AuditLog).values(user_id=None))
        await self._session.execute(delete(User))
        await self._session.commit()
