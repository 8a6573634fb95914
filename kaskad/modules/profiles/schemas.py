from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime
from kaskad.config.roles_config import ROLES, DEFAULT_ROLE


def _check_role(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in ROLES:
        raise ValueError(f"role must be one of: {', '.join(ROLES)}")
    return value


class ProfileCreate(BaseModel):
    id: Optional[str] = None  # defaults to the caller's user id
    studio_id: Optional[str] = None
    email: EmailStr
    full_name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str = DEFAULT_ROLE

    @field_validator("role")
    @classmethod
    def check_role(cls, value):
        return _check_role(value)


class ProfileUpdate(BaseModel):
    studio_id: Optional[str] = None
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[str] = None

    @field_validator("role")
    @classmethod
    def check_role(cls, value):
        return _check_role(value)


class ProfileResponse(BaseModel):
    id: str
    studio_id: Optional[str] = None
    email: str
    full_name: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str
    is_superadmin: bool = False
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileWithStudioResponse(ProfileResponse):
    studio_name: Optional[str] = None
    studio_description: Optional[str] = None
