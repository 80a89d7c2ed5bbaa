"""
SQLite engine and session lifecycle for the board store.

One process-wide manager is shared through get_orm_manager(); tests build
their own ORMManager against a throwaway file.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from trillo_mcp.config import get_default_db_path
from trillo_mcp.database.models.base import Base

SQLITE_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)

_global_orm_manager: Optional["ORMManager"] = None
_global_lock = threading.Lock()


def get_orm_manager(db_path: Optional[str] = None) -> "ORMManager":
    """Return the shared manager, creating it on first use."""
    global _global_orm_manager

    with _global_lock:
        if _global_orm_manager is None:
            _global_orm_manager = ORMManager(db_path)
        return _global_orm_manager


def reset_orm_manager() -> None:
    """Dispose of the shared manager (for testing)."""
    global _global_orm_manager

    with _global_lock:
        if _global_orm_manager is not None:
            _global_orm_manager.close()
            _global_orm_manager = None


def _apply_pragmas(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    for pragma in SQLITE_PRAGMAS:
        cursor.execute(pragma)
    cursor.close()


class ORMManager:
    """Owns the engine for one SQLite file and hands out sessions."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or get_default_db_path()
        self._engine = create_engine(
            f"sqlite:///{self.db_path}",
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
        )
        event.listen(self._engine, "connect", _apply_pragmas)
        self._session_factory: Optional[sessionmaker] = sessionmaker(
            bind=self._engine, autoflush=True, expire_on_commit=False
        )
        Base.metadata.create_all(self._engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Yield a session that commits on success and rolls back on error.

        Usage:
            with orm_manager.get_session() as session:
                session.add(Project(name="Launch", owner_user_id="user-1"))
        """
        if self._session_factory is None:
            raise RuntimeError("ORM Manager is closed")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def perform_health_check(self) -> Dict[str, Any]:
        """Report whether every board table exists in the database file."""
        if self._engine is None:
            return {"healthy": False, "error": "ORM Manager is closed"}

        try:
            present = set(inspect(self._engine).get_table_names())
        except SQLAlchemyError as e:
            return {"healthy": False, "error": str(e)}

        expected = set(Base.metadata.tables)
        missing = sorted(expected - present)
        if missing:
            return {"healthy": False, "error": f"Missing tables: {', '.join(missing)}"}
        return {"healthy": True, "database_path": self.db_path, "table_count": len(expected)}

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def __del__(self) -> None:
        self.close()
