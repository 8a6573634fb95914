import hashlib
import logging
import time
from supabase import Client
from kaskad.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from kaskad.config.settings import settings
from fastapi import HTTPException
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


# Short-lived token -> user cache so many parallel requests with the same token
# cost one Supabase Auth call
class TokenCache:
    def __init__(self, ttl_sec: float, max_size: int):
        self.ttl_sec = ttl_sec
        self.max_size = max_size
        self._entries: Dict[str, Tuple[Dict[str, Any], float]] = {}

    @staticmethod
    def key(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, token: str) -> bool:
        return self.key(token) in self._entries

    def get(self, token: str, now: Optional[float] = None) -> Optional[Dict[str, Any]]:
        now = time.monotonic() if now is None else now
        entry = self._entries.get(self.key(token))
        if entry is None:
            return None
        user_data, expiry = entry
        if now >= expiry:
            del self._entries[self.key(token)]
            return None
        return user_data

    def put(self, token: str, user_data: Dict[str, Any], now: Optional[float] = None) -> None:
        now = time.monotonic() if now is None else now
        cache_key = self.key(token)
        self._entries.pop(cache_key, None)
        if len(self._entries) >= self.max_size:
            self.purge_expired(now)
        while self._entries and len(self._entries) >= self.max_size:
            # dicts keep insertion order, so the first entry is the oldest
            del self._entries[next(iter(self._entries))]
        if self.max_size > 0:
            self._entries[cache_key] = (user_data, now + self.ttl_sec)

    def purge_expired(self, now: Optional[float] = None) -> int:
        now = time.monotonic() if now is None else now
        expired = [k for k, (_, expiry) in self._entries.items() if now >= expiry]
        for cache_key in expired:
            del self._entries[cache_key]
        if expired:
            logger.debug("Purged %d expired auth cache entries", len(expired))
        return len(expired)

    def evict(self, token: str) -> None:
        self._entries.pop(self.key(token), None)

    def clear(self) -> None:
        self._entries.clear()


_token_cache = TokenCache(settings.auth_cache_ttl_sec, settings.auth_cache_max_size)


def clear_auth_cache():
    _token_cache.clear()


class AuthService:
    def __init__(self, supabase: Client, cache: Optional[TokenCache] = None):
        self.supabase = supabase
        self.cache = _token_cache if cache is None else cache

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth"""
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            logger.info("Registered user %s", auth_response.user.id)
            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cached = self.cache.get(token)
            if cached is not None:
                return cached
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            self.cache.put(token, user_data)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            logger.error(f"Token lookup failed: {e}")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        self.cache.evict(token)
        try:
            # Supabase Auth tokens are stateless JWTs, so logout is mainly client-side
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
