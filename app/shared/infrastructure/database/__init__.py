# 📄 File: app/shared/infrastructure/database/__init__.py
# 🧭 Purpose (Layman Explanation):
# Groups the database connection and session tools in one place.
# 🧪 Purpose (Technical Summary):
# Re-exports the declarative Base, engine lifecycle helpers and the session manager.
# 🔗 Dependencies:
# connection.py, session.py
# 🔄 Connected Modules / Calls From:
# app.main, repository implementations, migrations/env.py

from .connection import (
    Base,
    close_database,
    database_health_check,
    db_manager,
    get_database_engine,
    init_database,
)
from .session import get_db_session, initialize_sessions, session_manager

__all__ = [
    "Base",
    "close_database",
    "database_health_check",
    "db_manager",
    "get_database_engine",
    "init_database",
    "get_db_session",
    "initialize_sessions",
    "session_manager",
]
