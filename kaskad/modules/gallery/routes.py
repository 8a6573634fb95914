from fastapi import APIRouter, Depends
from kaskad.database.supabase_client import get_supabase
from kaskad.modules.gallery.schemas import GalleryItemCreate, GalleryItemUpdate, GalleryItemResponse
from kaskad.modules.gallery.service import GalleryService
from kaskad.core.dependencies import get_actor, get_authenticated_actor
from kaskad.core.policies import Actor
from kaskad.config.settings import settings
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/gallery", tags=["gallery"])


def get_gallery_service(supabase: Client = Depends(get_supabase)) -> GalleryService:
    return GalleryService(supabase)


@router.get("", response_model=List[GalleryItemResponse])
async def list_gallery_items(
    studio_id: Optional[str] = None,
    media_type: Optional[str] = None,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    actor: Actor = Depends(get_actor),
    service: GalleryService = Depends(get_gallery_service)
):
    """List gallery items. No token needed for public items"""
    return service.list_items(
        actor,
        studio_id=studio_id,
        media_type=media_type,
        category=category,
        tag=tag,
        limit=settings.clamp_page_size(limit),
        offset=offset
    )


@router.post("", response_model=GalleryItemResponse, status_code=201)
async def create_gallery_item(
    item_data: GalleryItemCreate,
    actor: Actor = Depends(get_authenticated_actor),
    service: GalleryService = Depends(get_gallery_service)
):
    """Create gallery item (studio admins and teachers)"""
    return service.create_item(item_data, actor)


@router.get("/{item_id}", response_model=GalleryItemResponse)
async def get_gallery_item(
    item_id: str,
    actor: Actor = Depends(get_actor),
    service: GalleryService = Depends(get_gallery_service)
):
    """Get gallery item (public items without a token)"""
    return service.get_item(item_id, actor)


@router.put("/{item_id}", response_model=GalleryItemResponse)
async def update_gallery_item(
    item_id: str,
    item_data: GalleryItemUpdate,
    actor: Actor = Depends(get_authenticated_actor),
    service: GalleryService = Depends(get_gallery_service)
):
    """Update gallery item (studio admins and teachers)"""
    return service.update_item(item_id, item_data, actor)


@router.post("/{item_id}/like", response_model=GalleryItemResponse)
async def like_gallery_item(
    item_id: str,
    actor: Actor = Depends(get_authenticated_actor),
    service: GalleryService = Depends(get_gallery_service)
):
    """Increment the like counter (studio admins and teachers)"""
    return service.like_item(item_id, actor)


@router.delete("/{item_id}", status_code=204)
async def delete_gallery_item(
    item_id: str,
    actor: Actor = Depends(get_authenticated_actor),
    service: GalleryService = Depends(get_gallery_service)
):
    """Delete gallery item (studio admins and teachers)"""
    service.delete_item(item_id, actor)
    return None
