import logging
from supabase import Client
from postgrest.exceptions import APIError
from kaskad.modules.gallery.schemas import GalleryItemCreate, GalleryItemUpdate, GalleryItemResponse
from kaskad.modules.studios.service import StudioService
from kaskad.core.policies import Action, Actor, Resource, require, require_update, visible_rows
from kaskad.database.errors import raise_for_api_error
from kaskad.database.hooks import apply_update
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

# Columns that are NOT NULL in the table; an explicit null in an update is ignored
REQUIRED_COLUMNS = ("title", "media_url", "media_type")


class GalleryService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.studios = StudioService(supabase)

    def get_item_row(self, item_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("gallery_items")\
                .select("*")\
                .eq("id", item_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="Gallery item not found")
        return result.data[0]

    def get_item(self, item_id: str, actor: Actor) -> GalleryItemResponse:
        """Get gallery item by ID"""
        row = self.get_item_row(item_id)
        require(actor, Action.SELECT, Resource("gallery_items", row))
        return GalleryItemResponse(**row)

    def list_items(
        self,
        actor: Actor,
        studio_id: Optional[str] = None,
        media_type: Optional[str] = None,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[GalleryItemResponse]:
        """List gallery items, newest first: public ones plus the caller's studio's"""
        try:
            query = self.supabase.table("gallery_items").select("*")
            if actor.studio_id and actor.studio_active:
                query = query.or_(f"is_public.eq.true,studio_id.eq.{actor.studio_id}")
            else:
                query = query.eq("is_public", True)
            if studio_id:
                query = query.eq("studio_id", studio_id)
            if media_type:
                query = query.eq("media_type", media_type)
            if category:
                query = query.eq("category", category)
            if tag:
                query = query.contains("tags", [tag])
            result = query\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        return [GalleryItemResponse(**row) for row in visible_rows(actor, "gallery_items", result.data or [])]

    def create_item(self, item_data: GalleryItemCreate, actor: Actor) -> GalleryItemResponse:
        """Create a gallery item in one of the caller's studios"""
        row = item_data.model_dump()
        row["created_by"] = actor.user_id
        require(actor, Action.INSERT, Resource("gallery_items", row))
        self.studios.ensure_exists(row["studio_id"])
        try:
            result = self.supabase.table("gallery_items").insert(row).execute()
        except APIError as e:
            raise_for_api_error(e)
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create gallery item")
        logger.info("Gallery item %s created in studio %s by %s", result.data[0]["id"], row["studio_id"], actor.user_id)
        return GalleryItemResponse(**result.data[0])

    def update_item(self, item_id: str, item_data: GalleryItemUpdate, actor: Actor) -> GalleryItemResponse:
        """Update gallery item; moving it to another studio needs rights in both"""
        current = self.get_item_row(item_id)
        changes = item_data.model_dump(exclude_unset=True)
        for column in REQUIRED_COLUMNS:
            if column in changes and changes[column] is None:
                del changes[column]
        require_update(actor, "gallery_items", current, changes)
        if "studio_id" in changes and changes["studio_id"] != current.get("studio_id"):
            self.studios.ensure_exists(changes["studio_id"])
        row = apply_update(self.supabase, "gallery_items", current, changes)
        logger.info("Gallery item %s updated by %s", item_id, actor.user_id)
        return GalleryItemResponse(**row)

    def like_item(self, item_id: str, actor: Actor) -> GalleryItemResponse:
        """Increment likes_count"""
        current = self.get_item_row(item_id)
        changes = {"likes_count": (current.get("likes_count") or 0) + 1}
        require_update(actor, "gallery_items", current, changes)
        row = apply_update(self.supabase, "gallery_items", current, changes)
        return GalleryItemResponse(**row)

    def delete_item(self, item_id: str, actor: Actor) -> bool:
        """Delete gallery item"""
        current = self.get_item_row(item_id)
        require(actor, Action.DELETE, Resource("gallery_items", current))
        try:
            result = self.supabase.table("gallery_items")\
                .delete()\
                .eq("id", item_id)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        logger.info("Gallery item %s deleted by %s", item_id, actor.user_id)
        return len(result.data or []) > 0
