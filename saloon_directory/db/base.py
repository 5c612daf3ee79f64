from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def normalize_database_url(url: str) -> str:
    """Normalize PostgreSQL URL to use psycopg3 driver."""
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def build_engine(database_url: str) -> Engine:
    """Create an engine for the given URL.

    SQLite connections are shared across the threads FastAPI runs sync
    routes on; access is serialized by the service lock.
    """
    database_url = normalize_database_url(database_url)
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args)


def init_db(bind: Engine) -> None:
    """Create the storage tables if they do not exist yet."""
    # Register models on Base.metadata
    import saloon_directory.db.models  # noqa: F401

    Base.metadata.create_all(bind=bind)
