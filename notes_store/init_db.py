"""
Database initialization/migration script.

Creates the tables, upgrades installations whose notes predate ownership,
and seeds the operator's admin account. Run this module directly to prepare
a database without starting the API.
"""
import enum
import logging
import os
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import inspect, insert, select, text, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import Session

from notes_store.db import enable_foreign_keys
from notes_store.models import Base, Role, User
from notes_store.security import get_password_hash
from notes_store.users import create_user, get_user_by_email

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@example.com"
DEFAULT_ADMIN_PASSWORD = "admin123"

# Owner of notes left over from installations without accounts
FALLBACK_ADMIN_EMAIL = "temp@local"
FALLBACK_ADMIN_PASSWORD = "temp123"


class MigrationStatus(str, enum.Enum):
    NOT_NEEDED = "not_needed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class MigrationOutcome:
    status: MigrationStatus
    fallback_user_id: Optional[int] = None
    reassigned: int = 0
    error: Optional[str] = None


# PUBLIC_INTERFACE
def initialize_schema(engine: Engine) -> None:
    """Creates the users and notes tables if they do not exist."""
    enable_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)


def _notes_missing_owner_column(conn: Connection) -> bool:
    inspector = inspect(conn)
    if not inspector.has_table("notes"):
        return False
    return all(column["name"] != "user_id" for column in inspector.get_columns("notes"))


def _ensure_fallback_admin(conn: Connection) -> int:
    users = User.__table__
    admin_id = conn.execute(
        select(users.c.id).where(users.c.role == Role.ADMIN).order_by(users.c.id).limit(1)
    ).scalar()
    if admin_id is not None:
        return admin_id

    existing_id = conn.execute(
        select(users.c.id).where(users.c.email == FALLBACK_ADMIN_EMAIL)
    ).scalar()
    if existing_id is not None:
        conn.execute(update(users).where(users.c.id == existing_id).values(role=Role.ADMIN))
        return existing_id

    result = conn.execute(
        insert(users).values(
            email=FALLBACK_ADMIN_EMAIL,
            password_hash=get_password_hash(FALLBACK_ADMIN_PASSWORD),
            role=Role.ADMIN,
        )
    )
    return result.inserted_primary_key[0]


# PUBLIC_INTERFACE
def migrate_legacy_notes(engine: Engine) -> MigrationOutcome:
    """
    Adds the notes.user_id column to databases created before notes had
    owners, and hands every ownerless note to a fallback admin.

    Column, fallback admin and reassignment are applied in one transaction,
    so a failure leaves the database unmigrated and a later run retries.
    Once the column exists this is a no-op. Any error is reported in the
    returned outcome rather than raised.
    """
    enable_foreign_keys(engine)
    try:
        with engine.begin() as conn:
            if not _notes_missing_owner_column(conn):
                return MigrationOutcome(MigrationStatus.NOT_NEEDED)
            conn.execute(text(
                "ALTER TABLE notes ADD COLUMN user_id INTEGER REFERENCES users(id) ON DELETE CASCADE"
            ))
            fallback_id = _ensure_fallback_admin(conn)
            result = conn.execute(
                text("UPDATE notes SET user_id = :owner WHERE user_id IS NULL"),
                {"owner": fallback_id},
            )
            reassigned = result.rowcount
    except Exception as exc:
        logger.debug("Legacy notes migration rolled back", exc_info=True)
        return MigrationOutcome(MigrationStatus.FAILED, error=str(exc))
    return MigrationOutcome(MigrationStatus.SUCCEEDED, fallback_user_id=fallback_id, reassigned=reassigned)


# PUBLIC_INTERFACE
def ensure_admin_seed(db: Session, email: str, password: str) -> int:
    """Creates an admin account for `email` unless one exists. Returns its id."""
    user = get_user_by_email(db, email)
    if user is not None:
        return user.id
    user_id = create_user(db, email, password, role=Role.ADMIN)
    logger.info("Seeded admin account %s", email)
    return user_id


# PUBLIC_INTERFACE
def bootstrap(engine: Engine, session_factory, admin_email: str, admin_password: str) -> MigrationOutcome:
    """
    Startup sequence: schema, legacy migration, admin seed.

    A failed migration is logged and startup carries on with the schema as is.
    """
    initialize_schema(engine)
    logger.info("Database tables verified.")

    outcome = migrate_legacy_notes(engine)
    if outcome.status is MigrationStatus.FAILED:
        logger.error("Legacy notes migration skipped: %s", outcome.error)
    elif outcome.status is MigrationStatus.SUCCEEDED:
        logger.info(
            "Legacy notes migrated: %d note(s) assigned to account %s",
            outcome.reassigned,
            outcome.fallback_user_id,
        )

    db = session_factory()
    try:
        ensure_admin_seed(db, admin_email, admin_password)
    finally:
        db.close()
    return outcome


if __name__ == "__main__":
    from notes_store.db import SessionLocal, engine

    logging.basicConfig(level=logging.INFO)
    bootstrap(
        engine,
        SessionLocal,
        os.getenv("ADMIN_EMAIL", DEFAULT_ADMIN_EMAIL),
        os.getenv("ADMIN_PASSWORD", DEFAULT_ADMIN_PASSWORD),
    )
    print("Database tables created successfully.")
