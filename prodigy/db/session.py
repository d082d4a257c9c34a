from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.pool import StaticPool
from prodigy.core.config import settings

_engine = None


def get_engine():
    global _engine

    if _engine is not None:
        return _engine

    # Fallback to a local SQLite file
    db_url = settings.DATABASE_URL or "sqlite:///./sqlite.db"

    if db_url.startswith("sqlite"):
        # SQLite fix for multithreading
        connect_args = {"check_same_thread": False}
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            # In-memory databases live on a single shared connection
            _engine = create_engine(db_url, connect_args=connect_args, poolclass=StaticPool)
        else:
            _engine = create_engine(db_url, connect_args=connect_args)
        return _engine

    _engine = create_engine(db_url, pool_pre_ping=True)
    return _engine

engine = get_engine()


def init_db():
    # Import models so every table is registered on the metadata
    import prodigy.models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def get_db():
    with Session(engine) as session:
        yield session
