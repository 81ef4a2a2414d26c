from __future__ import annotations

import logging
from typing import Optional

from fastapi import Header, Request

from .config import get_settings
from .llm.client import LLMClient

logger = logging.getLogger(__name__)


def get_credential(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    """Bearer token from the Authorization header, else the configured API key.

    Returns None when neither is present; the LLM client rejects the call.
    """
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
        if token:
            return token
        logger.warning("Empty bearer token in Authorization header")
    return get_settings().api_key


def get_llm_client(request: Request) -> LLMClient:
    """LLM client sharing the app-wide httpx client when the lifespan created one."""
    http_client = getattr(request.app.state, "http_client", None)
    return LLMClient(http_client=http_client)
