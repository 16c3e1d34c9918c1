import enum

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Enum, func
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


# PUBLIC_INTERFACE
class Role(str, enum.Enum):
    """Closed set of account roles."""
    USER = "user"
    ADMIN = "admin"


# PUBLIC_INTERFACE
class User(Base):
    """
    SQLAlchemy model for an account of the notes manager.

    The email is stored lowercased; the password only as a bcrypt hash.
    """
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, native_enum=False, length=16, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=Role.USER,
        server_default=Role.USER.value,
    )
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, nullable=True)

    notes = relationship("Note", back_populates="owner", passive_deletes=True)


# PUBLIC_INTERFACE
class Note(Base):
    """
    SQLAlchemy model for a note. Every note has exactly one owner; deleting
    the owner deletes the note in the database (ON DELETE CASCADE).
    """
    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, nullable=True)

    owner = relationship("User", back_populates="notes")
