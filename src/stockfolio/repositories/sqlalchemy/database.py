"""Engine and session factory for the key-value state store."""

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def create_state_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the state database."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Request handlers and the refresh loop run on different threads
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=echo)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create the state table if it does not exist yet."""
    from stockfolio.repositories.sqlalchemy import orm_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
