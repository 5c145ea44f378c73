"""
Relational persistence for companies and events.
"""

from .database import create_db_engine, get_engine, init_db
from .models import Company, Event, SourceType, utcnow
from .store import DirectoryStore

__all__ = [
    "create_db_engine",
    "get_engine",
    "init_db",
    "Company",
    "Event",
    "SourceType",
    "utcnow",
    "DirectoryStore",
]
