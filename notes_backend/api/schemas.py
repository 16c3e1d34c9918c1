from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field

from notes_store.models import Role

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(DISPLAY_FORMAT) if value else None


# Auth

class RegisterRequest(BaseModel):
    """Request model to register a new account"""
    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., description="Plaintext password")


class LoginRequest(BaseModel):
    """Login credentials"""
    email: str
    password: str


# Users

class UserOut(BaseModel):
    """Account without sensitive fields"""
    id: int
    email: str
    role: Role
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RoleUpdateRequest(BaseModel):
    role: Role


class PasswordResetRequest(BaseModel):
    new_password: str


# Notes

class NoteWriteRequest(BaseModel):
    """Create or replace a note. Blank titles are rejected by the store."""
    title: str = Field("", max_length=255)
    content: Optional[str] = Field(default=None, description="Note content")


class NoteOut(BaseModel):
    id: int
    user_id: int
    title: str
    content: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def created_human(self) -> Optional[str]:
        return format_timestamp(self.created_at)

    @computed_field
    @property
    def updated_human(self) -> Optional[str]:
        return format_timestamp(self.updated_at)


class AdminNoteOut(NoteOut):
    owner_email: str


# Admin dashboard

class LatestNoteOut(BaseModel):
    id: int
    title: str
    owner_email: str
    created_at: Optional[datetime] = None


class StatsOut(BaseModel):
    users: int
    notes: int
    latest: List[LatestNoteOut]
