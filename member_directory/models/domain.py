# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
One canonical record per entity; external views are derived in
services/projection.py.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def refreshed_timestamp(previous: datetime) -> datetime:
    """Current time, nudged past `previous` so updated_at strictly increases."""
    now = utcnow()
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class Role(BaseModel):
    """A named category that members belong to."""
    id: Optional[int] = None
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Member(BaseModel):
    """A directory entry for one person, bound to exactly one role."""
    id: Optional[int] = None
    username: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = True
    role_id: int
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class RoleView(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MemberView(BaseModel):
    """Flattened member snapshot with the role's name and description."""
    id: int
    username: str
    display_name: str
    email: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    role_name: str
    role_description: Optional[str] = None
