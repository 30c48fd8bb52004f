"""Environment configuration."""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

DEV_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


def _split_csv(value: Optional[str]) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


@dataclass
class Settings:
    port: int = 3001
    env: str = "development"
    client_origins: List[str] = field(default_factory=list)
    allowed_ai_hosts: List[str] = field(default_factory=list)
    rate_limit_window: float = 60.0
    rate_limit_max: int = 20
    ai_timeout: float = 120.0

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def cors_origins(self) -> List[str]:
        if self.is_production:
            return list(self.client_origins)
        return list(DEV_ORIGINS)


def load_settings(env: Optional[dict] = None) -> Settings:
    """Build Settings from ``env`` (defaults to os.environ after loading .env)."""
    if env is None:
        load_dotenv()
        env = os.environ

    return Settings(
        port=int(env.get("ENGLEARN_PORT") or env.get("PORT") or 3001),
        env=(env.get("ENGLEARN_ENV") or "development").strip().lower(),
        client_origins=_split_csv(env.get("ENGLEARN_CLIENT_ORIGIN")),
        allowed_ai_hosts=[h.lower() for h in _split_csv(env.get("ENGLEARN_ALLOWED_AI_HOSTS"))],
        rate_limit_window=float(env.get("ENGLEARN_RATE_LIMIT_WINDOW") or 60),
        rate_limit_max=int(env.get("ENGLEARN_RATE_LIMIT_MAX") or 20),
        ai_timeout=float(env.get("ENGLEARN_AI_TIMEOUT") or 120),
    )
