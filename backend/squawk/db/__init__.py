from squawk.db.base import Base
from squawk.db.session import create_engine, create_session_maker, get_db, init_db

__all__ = ["Base", "create_engine", "create_session_maker", "get_db", "init_db"]
