from fastapi import APIRouter, Depends
from kaskad.database.supabase_client import get_supabase
from kaskad.modules.studios.schemas import StudioCreate, StudioUpdate, StudioResponse
from kaskad.modules.studios.service import StudioService
from kaskad.core.dependencies import get_authenticated_actor
from kaskad.core.policies import Actor
from kaskad.config.settings import settings
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/studios", tags=["studios"])


def get_studio_service(supabase: Client = Depends(get_supabase)) -> StudioService:
    return StudioService(supabase)


@router.get("", response_model=List[StudioResponse])
async def list_studios(
    limit: Optional[int] = None,
    offset: int = 0,
    actor: Actor = Depends(get_authenticated_actor),
    service: StudioService = Depends(get_studio_service)
):
    """List studios: all for superadmins, the caller's own studio otherwise"""
    return service.list_studios(actor, limit=settings.clamp_page_size(limit), offset=offset)


@router.post("", response_model=StudioResponse, status_code=201)
async def create_studio(
    studio_data: StudioCreate,
    actor: Actor = Depends(get_authenticated_actor),
    service: StudioService = Depends(get_studio_service)
):
    """Create a new studio (superadmin only)"""
    return service.create_studio(studio_data, actor)


@router.get("/{studio_id}", response_model=StudioResponse)
async def get_studio(
    studio_id: str,
    actor: Actor = Depends(get_authenticated_actor),
    service: StudioService = Depends(get_studio_service)
):
    """Get studio by ID (superadmin or member of the studio)"""
    return service.get_studio(studio_id, actor)


@router.put("/{studio_id}", response_model=StudioResponse)
async def update_studio(
    studio_id: str,
    studio_data: StudioUpdate,
    actor: Actor = Depends(get_authenticated_actor),
    service: StudioService = Depends(get_studio_service)
):
    """Update studio (superadmin only)"""
    return service.update_studio(studio_id, studio_data, actor)


@router.delete("/{studio_id}", status_code=204)
async def delete_studio(
    studio_id: str,
    actor: Actor = Depends(get_authenticated_actor),
    service: StudioService = Depends(get_studio_service)
):
    """Delete studio and its gallery; members are detached (superadmin only)"""
    service.delete_studio(studio_id, actor)
    return None
