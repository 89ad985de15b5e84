from .config import settings
from .database import Database, atomic, get_db
from .logging import logger, setup_logging

__all__ = [
    "Database",
    "atomic",
    "get_db",
    "logger",
    "settings",
    "setup_logging",
]
