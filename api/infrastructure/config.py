# api/infrastructure/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    duckdb_path: str
    rate_limit_per_minute: int
    debug: bool
    log_level: str
    cors_origins: tuple[str, ...]
    max_anexos_mb: int
    jwt_secret: str
    jwt_expire_minutes: int
    reset_token_ttl_minutes: int
    master_email: str
    master_password: str
    resend_api_key: str
    email_from: str
    app_base_url: str
    frontend_dir: str

    @property
    def limite_anexos_bytes(self) -> int:
        return self.max_anexos_mb * 1024 * 1024


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origins = os.environ.get("CORS_ORIGINS", "http://localhost:3000")
    return Settings(
        duckdb_path=os.environ.get("DUCKDB_PATH", ":memory:"),
        rate_limit_per_minute=int(os.environ.get("API_RATE_LIMIT_PER_MINUTE", "10")),
        debug=os.environ.get("API_DEBUG", "false").lower() == "true",
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        max_anexos_mb=int(os.environ.get("MAX_ANEXOS_MB", "25")),
        jwt_secret=os.environ.get("JWT_SECRET", "sicasv-dev-secret"),
        jwt_expire_minutes=int(os.environ.get("JWT_EXPIRE_MINUTES", "480")),
        reset_token_ttl_minutes=int(os.environ.get("RESET_TOKEN_TTL_MINUTES", "60")),
        master_email=os.environ.get("MASTER_EMAIL", "admin@sicasv.com"),
        master_password=os.environ.get("MASTER_PASSWORD", "master123"),
        resend_api_key=os.environ.get("RESEND_API_KEY", ""),
        email_from=os.environ.get("EMAIL_FROM", "SICASV <nao-responda@sicasv.com>"),
        app_base_url=os.environ.get("APP_BASE_URL", "http://localhost:3000").rstrip("/"),
        frontend_dir=os.environ.get("FRONTEND_DIR", "frontend"),
    )
