"""
Account operations.

Apart from registration and authentication these are unscoped: the calling
layer must check that the caller is an admin before invoking them.
"""
import logging
from typing import List, Optional

from passlib.exc import PasswordValueError
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from notes_store.errors import RegistrationFailed, ValidationFailed
from notes_store.models import Role, User
from notes_store.security import dummy_verify, get_password_hash, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 4


def _coerce_role(role) -> Role:
    try:
        return Role(role)
    except ValueError:
        raise ValidationFailed(f"Unknown role: {role!r}") from None


def _hash_password(password: str) -> str:
    try:
        return get_password_hash(password)
    except PasswordValueError:
        raise ValidationFailed("Password contains unsupported characters") from None


# PUBLIC_INTERFACE
def create_user(db: Session, email: str, password: str, role: Role = Role.USER) -> int:
    """
    Register a new account and return its id.

    The caller trims and lowercases the email. A duplicate email raises
    RegistrationFailed after rolling back, so no partial row is left behind.
    """
    if not email or not password:
        raise ValidationFailed("Email and password are required")
    user = User(email=email, password_hash=_hash_password(password), role=_coerce_role(role))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise RegistrationFailed() from exc
    logger.info("Created account %s with role %s", user.id, user.role.value)
    return user.id


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.execute(select(User).where(User.id == user_id)).scalar_one_or_none()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


# PUBLIC_INTERFACE
def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """
    Return the account matching the credentials, or None.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    user = get_user_by_email(db, email)
    if user is None:
        dummy_verify()
        return None
    if not verify_password(password or "", user.password_hash):
        return None
    return user


# PUBLIC_INTERFACE
def set_user_role(db: Session, user_id: int, role) -> int:
    """
    Change an account's role. Returns the number of rows changed.

    Demoting the last remaining admin is not prevented.
    """
    role = _coerce_role(role)
    result = db.execute(
        update(User)
        .where(User.id == user_id)
        .values(role=role, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount:
        logger.info("Account %s is now %s", user_id, role.value)
    return result.rowcount


# PUBLIC_INTERFACE
def reset_user_password(db: Session, user_id: int, new_password: str) -> int:
    """Replace an account's password hash. Returns the number of rows changed."""
    if not new_password:
        raise ValidationFailed("Password is required")
    result = db.execute(
        update(User)
        .where(User.id == user_id)
        .values(password_hash=_hash_password(new_password), updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount


def list_users(db: Session) -> List[User]:
    """All accounts, newest first."""
    return list(db.execute(select(User).order_by(User.id.desc())).scalars().all())


# PUBLIC_INTERFACE
def delete_user(db: Session, user_id: int) -> int:
    """
    Hard-delete an account. Its notes go with it through the foreign key.
    Returns the number of rows changed.
    """
    result = db.execute(
        delete(User).where(User.id == user_id).execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount:
        logger.info("Deleted account %s", user_id)
    return result.rowcount
