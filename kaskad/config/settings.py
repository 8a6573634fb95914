from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Policies are evaluated in-app, so data access runs with this key

    # Auth
    auth_cache_ttl_sec: int = 60
    auth_cache_max_size: int = 500

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # App
    app_name: str = "kaskad-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def clamp_page_size(self, limit: Optional[int]) -> int:
        if not limit or limit < 1:
            return self.default_page_size
        return min(limit, self.max_page_size)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
