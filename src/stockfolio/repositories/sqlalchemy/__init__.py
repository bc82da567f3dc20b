"""SQLAlchemy repository implementations."""

from stockfolio.repositories.sqlalchemy.database import (
    Base,
    create_session_factory,
    create_state_engine,
    init_db,
)
from stockfolio.repositories.sqlalchemy.state_repo import SqlAlchemyStateRepository

__all__ = [
    "Base",
    "create_session_factory",
    "create_state_engine",
    "init_db",
    "SqlAlchemyStateRepository",
]
