import logging
from supabase import Client
from postgrest.exceptions import APIError
from kaskad.modules.profiles.schemas import (
    ProfileCreate, ProfileUpdate, ProfileResponse, ProfileWithStudioResponse
)
from kaskad.modules.studios.service import StudioService
from kaskad.core.policies import Action, Actor, Resource, require, require_update
from kaskad.database.errors import raise_for_api_error
from kaskad.database.hooks import apply_update
from typing import Any, Dict, List, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

# Columns that are NOT NULL in the table; an explicit null in an update is ignored
REQUIRED_COLUMNS = ("email", "full_name", "role")


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.studios = StudioService(supabase)

    def get_profile_row(self, profile_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", profile_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return result.data[0]

    def get_profile(self, profile_id: str, actor: Actor) -> ProfileResponse:
        """Get profile by ID"""
        row = self.get_profile_row(profile_id)
        require(actor, Action.SELECT, Resource("profiles", row))
        return ProfileResponse(**row)

    def get_profile_with_studio(self, profile_id: str, actor: Actor) -> ProfileWithStudioResponse:
        """Get profile joined with its studio's name and description"""
        try:
            result = self.supabase.table("profiles_with_studio")\
                .select("*")\
                .eq("id", profile_id)\
                .limit(1)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        require(actor, Action.SELECT, Resource("profiles", result.data[0]))
        return ProfileWithStudioResponse(**result.data[0])

    def list_profiles(
        self,
        actor: Actor,
        studio_id: Optional[str] = None,
        role: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[ProfileResponse]:
        """List profiles, newest first, optionally narrowed to a studio and/or role"""
        require(actor, Action.SELECT, Resource("profiles"))
        try:
            query = self.supabase.table("profiles").select("*")
            if studio_id:
                query = query.eq("studio_id", studio_id)
            if role:
                query = query.eq("role", role)
            result = query\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
        except APIError as e:
            raise_for_api_error(e)
        return [ProfileResponse(**row) for row in result.data or []]

    def create_profile(self, profile_data: ProfileCreate, actor: Actor) -> ProfileResponse:
        """Create the caller's own profile"""
        row = profile_data.model_dump(exclude_none=True)
        row.setdefault("id", actor.user_id)
        require(actor, Action.INSERT, Resource("profiles", row))
        self.studios.ensure_exists(row.get("studio_id"))
        try:
            existing = self.supabase.table("profiles")\
                .select("id")\
                .eq("id", row["id"])\
                .limit(1)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="Profile already exists")
            result = self.supabase.table("profiles").insert(row).execute()
        except APIError as e:
            raise_for_api_error(e)
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to create profile")
        logger.info("Profile %s created (studio=%s, role=%s)", row["id"], row.get("studio_id"), row["role"])
        return ProfileResponse(**result.data[0])

    def update_profile(self, profile_id: str, profile_data: ProfileUpdate, actor: Actor) -> ProfileResponse:
        """Update the caller's own profile"""
        current = self.get_profile_row(profile_id)
        changes = profile_data.model_dump(exclude_unset=True)
        for column in REQUIRED_COLUMNS:
            if column in changes and changes[column] is None:
                del changes[column]
        require_update(actor, "profiles", current, changes)
        if "studio_id" in changes and changes["studio_id"] != current.get("studio_id"):
            self.studios.ensure_exists(changes.get("studio_id"))
        row = apply_update(self.supabase, "profiles", current, changes)
        logger.info("Profile %s updated (%s)", profile_id, ", ".join(sorted(changes)) or "touch")
        return ProfileResponse(**row)
