from fastapi import APIRouter, Depends
from kaskad.database.supabase_client import get_supabase
from kaskad.modules.profiles.schemas import (
    ProfileCreate, ProfileUpdate, ProfileResponse, ProfileWithStudioResponse
)
from kaskad.modules.profiles.service import ProfileService
from kaskad.core.dependencies import get_authenticated_actor
from kaskad.core.policies import Actor
from kaskad.config.settings import settings
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("", response_model=List[ProfileResponse])
async def list_profiles(
    studio_id: Optional[str] = None,
    role: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    actor: Actor = Depends(get_authenticated_actor),
    service: ProfileService = Depends(get_profile_service)
):
    """List profiles (any authenticated user)"""
    return service.list_profiles(
        actor,
        studio_id=studio_id,
        role=role,
        limit=settings.clamp_page_size(limit),
        offset=offset
    )


@router.post("", response_model=ProfileResponse, status_code=201)
async def create_profile(
    profile_data: ProfileCreate,
    actor: Actor = Depends(get_authenticated_actor),
    service: ProfileService = Depends(get_profile_service)
):
    """Create the caller's own profile"""
    return service.create_profile(profile_data, actor)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    actor: Actor = Depends(get_authenticated_actor),
    service: ProfileService = Depends(get_profile_service)
):
    """Get profile by ID"""
    return service.get_profile(profile_id, actor)


@router.get("/{profile_id}/with-studio", response_model=ProfileWithStudioResponse)
async def get_profile_with_studio(
    profile_id: str,
    actor: Actor = Depends(get_authenticated_actor),
    service: ProfileService = Depends(get_profile_service)
):
    """Get profile with its studio's name and description"""
    return service.get_profile_with_studio(profile_id, actor)


@router.put("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: str,
    profile_data: ProfileUpdate,
    actor: Actor = Depends(get_authenticated_actor),
    service: ProfileService = Depends(get_profile_service)
):
    """Update profile (only your own)"""
    return service.update_profile(profile_id, profile_data, actor)
