"""SQLAlchemy ORM model definitions."""

from sqlalchemy import Column, String, DateTime, Text

from stockfolio.core.timezone import now_eastern
from stockfolio.repositories.sqlalchemy.database import Base


def _now_naive():
    return now_eastern().replace(tzinfo=None)


class AppStateORM(Base):
    """Key-value row holding one serialized state blob."""

    __tablename__ = "app_state"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at_est = Column(DateTime, nullable=False, default=_now_naive, onupdate=_now_naive)
