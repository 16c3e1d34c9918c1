import os
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///./notes.db"


# PUBLIC_INTERFACE
def get_database_url():
    """
    Retrieves the database URL from the environment variable DATABASE_URL.
    Falls back to a SQLite file in the working directory.
    """
    load_dotenv()
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def _on_sqlite_connect(dbapi_connection, connection_record):
    # Let SQLAlchemy emit BEGIN itself so DDL runs inside transactions too.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


# PUBLIC_INTERFACE
def enable_foreign_keys(engine: Engine) -> None:
    """
    Turns on referential integrity for every SQLite connection of the engine.

    Safe to call more than once; other backends enforce foreign keys natively.
    """
    if engine.dialect.name != "sqlite":
        return
    if not event.contains(engine, "connect", _on_sqlite_connect):
        event.listen(engine, "connect", _on_sqlite_connect)
    if not event.contains(engine, "begin", _on_sqlite_begin):
        event.listen(engine, "begin", _on_sqlite_begin)


# PUBLIC_INTERFACE
def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Builds an engine with foreign-key enforcement already wired in."""
    if database_url.startswith("sqlite"):
        # SQLite needs check_same_thread=False for FastAPI's threadpool
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(database_url, future=True, echo=False, **kwargs)
    enable_foreign_keys(engine)
    return engine


DATABASE_URL = get_database_url()

engine = create_db_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency that provides a database session and ensures proper cleanup.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
