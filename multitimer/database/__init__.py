"""Database package."""

from .db import configure_engine, get_item, get_session, init_db, set_item
from .models import KeyValue

__all__ = [
    "configure_engine",
    "get_item",
    "get_session",
    "init_db",
    "set_item",
    "KeyValue",
]
