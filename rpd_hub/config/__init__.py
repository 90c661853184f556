from .settings import settings
from .database import async_session_manager, engine, run_migrations
from .table_names import TableNames

__all__ = [
    "settings",
    "async_session_manager",
    "engine",
    "run_migrations",
    "TableNames",
]
