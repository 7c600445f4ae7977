from squawk.models.user import User
from squawk.models.refresh_token import RefreshToken
from squawk.models.audit_log import AuditLog

__all__ = [
    "User",
    "RefreshToken",
    "AuditLog",
]
