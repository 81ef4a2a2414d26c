from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple


# Fixed by the remote API contract
API_URL = "https://api.mentorpiece.org/v1/process-ai-request"


def _s(name: str, default: Optional[str]) -> Optional[str]:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip()


def _f(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except Exception:
        return default


def _list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(p.strip() for p in raw.split(",") if p.strip())


@dataclass(frozen=True)
class Settings:
    api_url: str = API_URL
    api_key: Optional[str] = None
    request_timeout_sec: float = 120.0
    cors_origins: Tuple[str, ...] = ("*",)


def load_settings() -> Settings:
    return Settings(
        api_key=_s("MENTORPIECE_API_KEY", None),
        request_timeout_sec=_f("TC_REQUEST_TIMEOUT_SEC", 120.0),
        cors_origins=_list("TC_CORS_ORIGINS", "*"),
    )


_SETTINGS = load_settings()


def get_settings() -> Settings:
    return _SETTINGS
