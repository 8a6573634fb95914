"""
Core dependencies: resolve the caller of a request into an Actor
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from kaskad.core.policies import Actor
from kaskad.database.supabase_client import get_auth_client, get_supabase
from kaskad.modules.auth.service import AuthService
from supabase import Client
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_auth_client)) -> AuthService:
    return AuthService(supabase)


def get_profile_row(user_id: str, supabase: Client) -> Optional[Dict[str, Any]]:
    result = supabase.table("profiles")\
        .select("*")\
        .eq("id", user_id)\
        .limit(1)\
        .execute()
    return result.data[0] if result.data else None


def get_studio_row(studio_id: str, supabase: Client) -> Optional[Dict[str, Any]]:
    result = supabase.table("studios")\
        .select("*")\
        .eq("id", studio_id)\
        .limit(1)\
        .execute()
    return result.data[0] if result.data else None


def load_actor(user_data: dict, supabase: Client) -> Actor:
    """Build the Actor for an authenticated user from their profile and studio rows."""
    profile = get_profile_row(user_data["id"], supabase)
    studio = None
    if profile and profile.get("studio_id"):
        studio = get_studio_row(profile["studio_id"], supabase)
    return Actor.from_profile(user_data, profile, studio)


def get_actor(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    auth_service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_supabase)
) -> Actor:
    """Actor for the request; anonymous when no bearer token is sent. Cached on request.state."""
    cached = getattr(request.state, "actor", None)
    if cached is not None:
        return cached
    if credentials is None:
        actor = Actor.anonymous()
    else:
        user_data = auth_service.get_current_user(credentials.credentials)
        actor = load_actor(user_data, supabase)
    request.state.actor = actor
    return actor


def get_authenticated_actor(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor
