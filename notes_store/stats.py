from typing import List

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from notes_store.models import Note, User


# Read-only aggregates for the admin dashboard

def count_users(db: Session) -> int:
    return int(db.execute(select(func.count()).select_from(User)).scalar_one() or 0)


def count_notes(db: Session) -> int:
    return int(db.execute(select(func.count()).select_from(Note)).scalar_one() or 0)


def latest_notes(db: Session, limit: int = 10) -> List[dict]:
    """
    The `limit` most recent notes with their owner's email, newest first.
    """
    stmt = (
        select(Note.id, Note.title, User.email.label("owner_email"), Note.created_at)
        .join(User, User.id == Note.user_id)
        .order_by(Note.id.desc())
        .limit(limit)
    )
    return [dict(row) for row in db.execute(stmt).mappings().all()]
