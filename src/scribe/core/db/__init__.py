"""Database utilities - engine, session, table creation."""

from src.scribe.core.db.engine import dispose_engine, get_engine
from src.scribe.core.db.schema import init_models
from src.scribe.core.db.session import get_session

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
    # Schema
    "init_models",
]
