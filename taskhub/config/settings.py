from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

DEFAULT_SESSION_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # Sessions (signed cookie)
    session_secret_key: str = DEFAULT_SESSION_SECRET
    session_cookie: str = "taskhub_session"
    session_max_age: int = 14 * 24 * 60 * 60  # seconds

    # Password hashing
    bcrypt_rounds: int = 12

    # App
    app_name: str = "taskhub-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
