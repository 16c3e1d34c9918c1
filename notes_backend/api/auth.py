from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Response, status
from fastapi.security import APIKeyCookie
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from notes_backend.api.config import ALGORITHM, SECRET_KEY, SESSION_COOKIE_NAME, SESSION_EXPIRE_MINUTES
from notes_store.db import get_db
from notes_store.models import Note, Role
from notes_store.notes import get_note
from notes_store.users import get_user

# Cookie-backed session; a missing cookie means an anonymous caller
session_cookie = APIKeyCookie(name=SESSION_COOKIE_NAME, auto_error=False)


@dataclass(frozen=True)
class CallerIdentity:
    """Who is making the current request. Resolved once per request."""
    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def create_session_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed token binding the session to an account id."""
    expire = datetime.now(tz=timezone.utc) + (expires_delta or timedelta(minutes=SESSION_EXPIRE_MINUTES))
    return jwt.encode({"sub": str(user_id), "exp": expire}, SECRET_KEY, algorithm=ALGORITHM)


def start_session(response: Response, user_id: int) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user_id),
        max_age=SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )


def end_session(response: Response) -> None:
    # Tokens are stateless: a copied token stays valid until its exp claim
    # (SESSION_EXPIRE_MINUTES). Logout only removes it from this client.
    response.delete_cookie(key=SESSION_COOKIE_NAME, httponly=True, samesite="lax")


# PUBLIC_INTERFACE
def get_caller(token: Optional[str] = Depends(session_cookie), db: Session = Depends(get_db)) -> Optional[CallerIdentity]:
    """
    Dependency resolving the session cookie into a CallerIdentity.

    Returns None for anonymous callers, bad or expired tokens, and tokens of
    accounts that no longer exist.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        return None
    user = get_user(db, user_id)
    if user is None:
        return None
    return CallerIdentity(user_id=user.id, role=user.role)


# PUBLIC_INTERFACE
def require_caller(caller: Optional[CallerIdentity] = Depends(get_caller)) -> CallerIdentity:
    """
    Enforce authentication.

    Raises:
        401 if there is no valid session.
    """
    if caller is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return caller


# PUBLIC_INTERFACE
def require_admin(caller: CallerIdentity = Depends(require_caller)) -> CallerIdentity:
    """
    Enforce the admin role.

    Raises:
        403 if the caller is not an admin.
    """
    if not caller.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return caller


def is_note_owner(caller: CallerIdentity, note: Note) -> bool:
    return note.user_id == caller.user_id


# PUBLIC_INTERFACE
def fetch_owned_note(db: Session, caller: CallerIdentity, note_id: int) -> Optional[Note]:
    """
    Fetch-and-authorize: the note if it exists and belongs to the caller.

    Someone else's note comes back as None, exactly like a missing one, so
    non-owners cannot learn which note ids exist.
    """
    note = get_note(db, note_id)
    if note is None or not is_note_owner(caller, note):
        return None
    return note
