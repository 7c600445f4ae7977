from squawk.storage.interfaces import AbstractUserStore, RefreshTokenRecord, UserRecord
from squawk.storage.sql_store import SqlUserStore

__all__ = ["AbstractUserStore", "RefreshTokenRecord", "SqlUserStore", "UserRecord"]
