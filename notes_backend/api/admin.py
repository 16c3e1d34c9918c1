from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from notes_backend.api.auth import require_admin
from notes_backend.api.schemas import (
    AdminNoteOut,
    PasswordResetRequest,
    RoleUpdateRequest,
    StatsOut,
    UserOut,
)
from notes_store import notes as note_store
from notes_store import stats as stats_store
from notes_store import users as user_store
from notes_store.db import get_db
from notes_store.users import MIN_PASSWORD_LENGTH

# Every route here is for admins only; the role is checked once per request
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])

LATEST_NOTES_LIMIT = 10


def _require_changed(rows: int, detail: str) -> None:
    if not rows:
        raise HTTPException(status_code=404, detail=detail)


@router.get("", response_model=StatsOut, summary="Dashboard statistics")
def dashboard(db: Session = Depends(get_db)):
    """Account and note counts plus the latest notes."""
    return StatsOut(
        users=stats_store.count_users(db),
        notes=stats_store.count_notes(db),
        latest=stats_store.latest_notes(db, LATEST_NOTES_LIMIT),
    )


# -------- Accounts --------

@router.get("/users", response_model=List[UserOut], summary="List all accounts")
def list_users(db: Session = Depends(get_db)):
    return user_store.list_users(db)


@router.put("/users/{user_id}/role", response_model=UserOut, summary="Change an account's role")
def change_role(user_id: int, payload: RoleUpdateRequest, db: Session = Depends(get_db)):
    """
    Allowed roles: user, admin.
    Nothing stops the last admin from being demoted.
    """
    _require_changed(user_store.set_user_role(db, user_id, payload.role), "User not found")
    return user_store.get_user(db, user_id)


@router.post("/users/{user_id}/reset-password", status_code=204, summary="Set a new password")
def reset_password(user_id: int, payload: PasswordResetRequest, db: Session = Depends(get_db)):
    if len(payload.new_password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters.",
        )
    _require_changed(user_store.reset_user_password(db, user_id, payload.new_password), "User not found")
    return Response(status_code=204)


@router.delete("/users/{user_id}", status_code=204, summary="Delete an account and its notes")
def delete_user(user_id: int, db: Session = Depends(get_db)):
    _require_changed(user_store.delete_user(db, user_id), "User not found")
    return Response(status_code=204)


# -------- Notes moderation --------

@router.get("/notes", response_model=List[AdminNoteOut], summary="List every note")
def list_all_notes(db: Session = Depends(get_db)):
    return note_store.list_notes_with_owner_email(db)


@router.delete("/notes/{note_id}", status_code=204, summary="Delete any note")
def delete_any_note(note_id: int, db: Session = Depends(get_db)):
    _require_changed(note_store.delete_note(db, note_id), "Note not found")
    return Response(status_code=204)
