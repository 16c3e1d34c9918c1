"""
Note operations.

get_note is owner-agnostic so admins can look up any note. User-facing code
must check ownership of the returned record before showing or mutating it.
"""
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from notes_store.errors import ValidationFailed
from notes_store.models import Note, User


def _clean_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationFailed("Title is required")
    return title


def _clean_content(content: Optional[str]) -> Optional[str]:
    # Empty content is stored as NULL
    return content or None


# PUBLIC_INTERFACE
def list_notes_for_owner(db: Session, user_id: int) -> List[Note]:
    """Notes owned by user_id, newest first."""
    stmt = select(Note).where(Note.user_id == user_id).order_by(Note.id.desc())
    return list(db.execute(stmt).scalars().all())


# PUBLIC_INTERFACE
def list_notes_with_owner_email(db: Session) -> List[dict]:
    """Every note with its owner's email, newest first. Admin view."""
    stmt = (
        select(
            Note.id,
            Note.user_id,
            User.email.label("owner_email"),
            Note.title,
            Note.content,
            Note.created_at,
            Note.updated_at,
        )
        .join(User, User.id == Note.user_id)
        .order_by(Note.id.desc())
    )
    return [dict(row) for row in db.execute(stmt).mappings().all()]


def get_note(db: Session, note_id: int) -> Optional[Note]:
    return db.execute(select(Note).where(Note.id == note_id)).scalar_one_or_none()


# PUBLIC_INTERFACE
def create_note(db: Session, user_id: int, title: str, content: Optional[str] = None) -> int:
    """Create a note owned by user_id and return its id."""
    note = Note(user_id=user_id, title=_clean_title(title), content=_clean_content(content))
    db.add(note)
    db.commit()
    return note.id


# PUBLIC_INTERFACE
def update_note(db: Session, note_id: int, title: str, content: Optional[str] = None) -> int:
    """
    Replace title and content. Ownership must already have been verified.
    Returns the number of rows changed.
    """
    result = db.execute(
        update(Note)
        .where(Note.id == note_id)
        .values(title=_clean_title(title), content=_clean_content(content), updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount


# PUBLIC_INTERFACE
def delete_note(db: Session, note_id: int) -> int:
    """Delete a note. Ownership must already have been verified."""
    result = db.execute(
        delete(Note).where(Note.id == note_id).execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount
