from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from kaskad.config.roles_config import SUBSCRIPTION_PLANS, DEFAULT_SUBSCRIPTION_PLAN


def _check_plan(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in SUBSCRIPTION_PLANS:
        raise ValueError(f"subscription_plan must be one of: {', '.join(SUBSCRIPTION_PLANS)}")
    return value


class StudioCreate(BaseModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    subscription_plan: str = DEFAULT_SUBSCRIPTION_PLAN
    active: bool = True

    @field_validator("subscription_plan")
    @classmethod
    def check_plan(cls, value):
        return _check_plan(value)


class StudioUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    subscription_plan: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("subscription_plan")
    @classmethod
    def check_plan(cls, value):
        return _check_plan(value)


class StudioResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    subscription_plan: Optional[str] = None
    active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
