from passlib.context import CryptContext
from passlib.exc import PasswordValueError

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against its hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except PasswordValueError:
        # bcrypt cannot hash such a password, so it can never match
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a plaintext password.

    Raises:
        PasswordValueError if bcrypt refuses the password (e.g. a NUL byte).
    """
    return pwd_context.hash(password)


def dummy_verify() -> None:
    """Spend the time of one verification so unknown emails are not faster."""
    pwd_context.dummy_verify()
