import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from squawk.models.audit_log import AuditLog


async def log_action(
    session: AsyncSession,
    user_id: uuid.UUID | None,
    action: str,
    resource: str = "session",
    details: dict | None = None,
    ip_address: str | None = None,
) -> None:
    """Record an auth event. Never pass tokens or passwords in details."""
    session.add(
        AuditLog(
            user_id=user_id,
            action=action,
            resource=resource,
            details=details,
            ip_address=ip_address,
        )
    )
    await session.commit()
