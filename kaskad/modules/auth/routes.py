from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPAuthorizationCredentials
from kaskad.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, MeResponse
)
from kaskad.modules.auth.service import AuthService
from kaskad.core.dependencies import get_auth_service, get_authenticated_actor, get_profile_row, security
from kaskad.core.policies import Actor
from kaskad.config.roles_config import ROLE_MATRIX
from kaskad.database.supabase_client import get_supabase
from supabase import Client

router = APIRouter(prefix="/auth", tags=["auth"])


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(
    actor: Actor = Depends(get_authenticated_actor),
    supabase: Client = Depends(get_supabase),
):
    """Current user, their profile (null before onboarding) and what their role allows (for frontend UI)."""
    profile = get_profile_row(actor.user_id, supabase)
    role_key = "superadmin" if actor.is_superadmin else actor.role
    return MeResponse(
        id=actor.user_id,
        email=actor.email,
        profile=profile,
        permissions=ROLE_MATRIX.get(role_key, {}) if role_key else {},
    )
