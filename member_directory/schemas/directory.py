# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas — API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

EMAIL_MAX_LENGTH = 255


def _check_email_length(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) > EMAIL_MAX_LENGTH:
        raise ValueError(f"email must be at most {EMAIL_MAX_LENGTH} characters")
    return v


# ── Role Schemas ──

class RoleCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50, description="Unique role name")
    description: Optional[str] = Field(default=None, max_length=255)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v


class RoleUpdateRequest(RoleCreateRequest):
    """Full replacement for PUT /api/v1/roles/{id}."""


# ── Member Schemas ──

class MemberCreateRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    display_name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[str] = Field(default=None, max_length=255)
    role_id: int = Field(..., ge=1)

    @field_validator("username", "display_name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def email_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_email_length(v)


class MemberUpdateRequest(BaseModel):
    """
    Partial update model for PATCH /api/v1/members/{id}.
    Only fields present in the body are applied; username is not accepted.
    """
    model_config = ConfigDict(extra="forbid")

    display_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[str] = Field(default=None, max_length=255)
    is_active: Optional[bool] = None
    role_id: Optional[int] = Field(default=None, ge=1)

    @field_validator("display_name", "is_active", "role_id", mode="before")
    @classmethod
    def required_when_present(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("email")
    @classmethod
    def email_length(cls, v: Optional[str]) -> Optional[str]:
        return _check_email_length(v)

    def changes(self) -> dict:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)
