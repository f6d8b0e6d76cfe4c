# qrlink/config.py

import os
import logging
from typing import Literal
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict


logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "qrlink-dev-secret-change-me"


class Settings(BaseModel):
    """
    Runtime configuration for the API.
    Built once from environment variables (and a local .env file).
    """
    model_config = ConfigDict(frozen=True)

    secret_key: str = DEV_SECRET_KEY
    algorithm: str = "HS256"
    auth_strategy: Literal["token", "session"] = "token"
    environment: str = "development"
    token_ttl_hours: int = 168
    cookie_name: str = "qr_token"
    public_base_url: str = "http://localhost:8000"
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def cookie_samesite(self) -> str:
        return "none" if self.is_production else "lax"


def load_settings() -> Settings:
    load_dotenv()

    secret_key = os.getenv("JWT_SECRET_KEY")
    if not secret_key:
        logger.warning("JWT_SECRET_KEY is not set, using the development key")
        secret_key = DEV_SECRET_KEY

    origins = os.getenv("QRLINK_CORS_ORIGINS", "*")

    return Settings(
        secret_key=secret_key,
        auth_strategy=os.getenv("QRLINK_AUTH_STRATEGY", "token").lower(),
        environment=os.getenv("QRLINK_ENV", "development").lower(),
        token_ttl_hours=int(os.getenv("QRLINK_TOKEN_TTL_HOURS", "168")),
        public_base_url=os.getenv("QRLINK_PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.getenv("QRLINK_LOG_LEVEL", "INFO").upper(),
    )
