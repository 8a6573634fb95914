import logging
from supabase import Client
from postgrest.exceptions import APIError
from kaskad.modules.studios.schemas import StudioCreate, StudioUpdate, StudioResponse
from kaskad.core.policies import Action, Actor, Resource, require, require_update, visible_rows
from kaskad.database.errors import raise_for_api_error
from kaskad.database.hooks import apply_update, apply_update_many
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class StudioService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_studio_row(self, studio_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("studios")\
                .select("*")\
                .eq("id", studio_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="Studio not found")
        return result.data[0]

    def get_studio(self, studio_id: str, actor: Actor) -> StudioResponse:
        """Get studio by ID"""
        row = self.get_studio_row(studio_id)
        require(actor, Action.SELECT, Resource("studios", row))
        return StudioResponse(**row)

    def list_studios(self, actor: Actor, limit: int = 20, offset: int = 0) -> List[StudioResponse]:
        """Superadmins see every studio; everyone else at most their own."""
        if not actor.is_superadmin and not actor.studio_id:
            return []
        try:
            query = self.supabase.table("studios").select("*")
            if not actor.is_superadmin:
                query = query.eq("id", actor.studio_id)
            result = query\
                .order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        return [StudioResponse(**row) for row in visible_rows(actor, "studios", result.data or [])]

    def create_studio(self, studio_data: StudioCreate, actor: Actor) -> StudioResponse:
        """Create a new studio"""
        row = studio_data.model_dump(exclude_none=True)
        require(actor, Action.INSERT, Resource("studios", row))
        try:
            result = self.supabase.table("studios").insert(row).execute()
        except APIError as e:
            raise_for_api_error(e)
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create studio")
        logger.info("Studio %s created by %s", result.data[0]["id"], actor.user_id)
        return StudioResponse(**result.data[0])

    def update_studio(self, studio_id: str, studio_data: StudioUpdate, actor: Actor) -> StudioResponse:
        """Update studio"""
        current = self.get_studio_row(studio_id)
        changes = studio_data.model_dump(exclude_unset=True)
        require_update(actor, "studios", current, changes)
        row = apply_update(self.supabase, "studios", current, changes)
        logger.info("Studio %s updated by %s", studio_id, actor.user_id)
        return StudioResponse(**row)

    def delete_studio(self, studio_id: str, actor: Actor) -> bool:
        """Delete studio: its gallery items go with it, its members stay without a studio.

        The studio row goes first. The foreign keys in schema.sql cascade in the
        same statement; the cleanup below only catches children the database
        left behind, so a failed delete never touches a surviving studio's rows.
        """
        current = self.get_studio_row(studio_id)
        require(actor, Action.DELETE, Resource("studios", current))
        try:
            result = self.supabase.table("studios")\
                .delete()\
                .eq("id", studio_id)\
                .execute()
            if not result.data:
                return False

            orphans = self.supabase.table("gallery_items")\
                .delete()\
                .eq("studio_id", studio_id)\
                .execute()

            members = self.supabase.table("profiles")\
                .select("id, updated_at")\
                .eq("studio_id", studio_id)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        apply_update_many(self.supabase, "profiles", members.data or [], {"studio_id": None})
        logger.info(
            "Studio %s deleted by %s (%d items removed, %d members detached)",
            studio_id, actor.user_id, len(orphans.data or []), len(members.data or [])
        )
        return True

    def ensure_exists(self, studio_id: Optional[str]) -> None:
        """Foreign key check for rows that reference a studio."""
        if studio_id is None:
            return
        try:
            result = self.supabase.table("studios")\
                .select("id")\
                .eq("id", studio_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        if not result.data:
            raise HTTPException(status_code=409, detail=f"Studio {studio_id} does not exist")
