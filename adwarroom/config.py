"""Environment-backed settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_PORT = 3001
COMPETITOR_DELAY_SECONDS = 0.5


class MissingCredentialError(RuntimeError):
    """Raised when a required API credential is not configured."""


@dataclass(frozen=True, slots=True)
class Settings:
    meta_access_token: str | None = None
    rainforest_api_key: str | None = None
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    competitor_delay: float = COMPETITOR_DELAY_SECONDS

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            meta_access_token=_env("META_ACCESS_TOKEN"),
            rainforest_api_key=_env("RAINFOREST_API_KEY"),
            port=int(os.environ.get("PORT", DEFAULT_PORT)),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def meta_configured(self) -> bool:
        return bool(self.meta_access_token)

    @property
    def rainforest_configured(self) -> bool:
        return bool(self.rainforest_api_key)

    def require_meta_token(self) -> str:
        if not self.meta_access_token:
            raise MissingCredentialError("META_ACCESS_TOKEN not found in environment variables")
        return self.meta_access_token

    def require_rainforest_key(self) -> str:
        if not self.rainforest_api_key:
            raise MissingCredentialError("RAINFOREST_API_KEY not configured")
        return self.rainforest_api_key


def _env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
