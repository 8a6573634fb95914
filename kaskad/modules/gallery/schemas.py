from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from kaskad.config.roles_config import MEDIA_TYPES


def _check_media_type(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in MEDIA_TYPES:
        raise ValueError(f"media_type must be one of: {', '.join(MEDIA_TYPES)}")
    return value


class GalleryItemCreate(BaseModel):
    studio_id: str
    title: str
    description: Optional[str] = None
    media_url: str
    media_type: str
    category: Optional[str] = None
    tags: List[str] = []
    is_public: bool = False

    @field_validator("media_type")
    @classmethod
    def check_media_type(cls, value):
        return _check_media_type(value)


class GalleryItemUpdate(BaseModel):
    studio_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    media_url: Optional[str] = None
    media_type: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None
    likes_count: Optional[int] = Field(default=None, ge=0)

    @field_validator("media_type")
    @classmethod
    def check_media_type(cls, value):
        return _check_media_type(value)


class GalleryItemResponse(BaseModel):
    id: str
    studio_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    media_url: str
    media_type: str
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = False
    likes_count: Optional[int] = 0
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
