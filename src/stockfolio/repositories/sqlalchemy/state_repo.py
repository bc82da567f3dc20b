"""SQLAlchemy implementation of StateRepository."""

from typing import Optional

from sqlalchemy.orm import sessionmaker

from stockfolio.repositories.sqlalchemy.orm_models import AppStateORM


class SqlAlchemyStateRepository:
    """
    SQLAlchemy-backed key-value state repository.

    Opens a short-lived session per call, so one instance can be shared by
    request handlers and the background refresh loop.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def load(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None."""
        with self._session_factory() as db:
            row = db.query(AppStateORM).filter(AppStateORM.key == key).first()
            return row.value if row else None

    def save(self, key: str, value: str) -> None:
        """Insert or replace the value for key."""
        with self._session_factory() as db:
            row = db.query(AppStateORM).filter(AppStateORM.key == key).first()
            if row:
                row.value = value
            else:
                db.add(AppStateORM(key=key, value=value))
            db.commit()

    def delete(self, key: str) -> None:
        """Remove key if present."""
        with self._session_factory() as db:
            db.query(AppStateORM).filter(AppStateORM.key == key).delete()
            db.commit()
