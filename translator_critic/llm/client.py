from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..config import get_settings
from ..schemas import AIRequest, AIResponse
from ..utils.exceptions import APIError, AuthenticationError, DecodeError

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API Key is missing. Please enter your MentorPiece API Key."
INVALID_RESPONSE_MESSAGE = "Received an invalid response from the AI service."


def _api_error_from(resp: httpx.Response) -> APIError:
    """Build an APIError from a non-success response.

    Uses the backend's ``message`` when the body is JSON and carries one,
    otherwise falls back to ``API Error: <status> <reason>``.
    """
    try:
        body = resp.json()
    except ValueError:
        body = None

    message = body.get("message") if isinstance(body, dict) else None
    if not message:
        message = f"API Error: {resp.status_code} {resp.reason_phrase}"

    return APIError(
        str(message),
        status_code=resp.status_code,
        status_text=resp.reason_phrase,
    )


def _extract_response_text(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError as e:
        raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=resp.status_code) from e

    try:
        return AIResponse.model_validate(data).response
    except PydanticValidationError as e:
        raise DecodeError(INVALID_RESPONSE_MESSAGE, status_code=resp.status_code) from e


class LLMClient:
    """Thin client for the single ``process-ai-request`` endpoint.

    One attempt per call, no retries. Pass ``http_client`` to supply the
    transport (tests use one built on ``httpx.MockTransport``); otherwise a
    short-lived ``httpx.AsyncClient`` is opened per call with the configured
    timeout.
    """

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        *,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self._http_client = http_client
        self.api_url = api_url or settings.api_url
        self.timeout = float(timeout if timeout is not None else settings.request_timeout_sec)

    async def invoke(self, model_identifier: str, prompt: str, credential: Optional[str]) -> str:
        """Send ``prompt`` to ``model_identifier`` and return the raw response text.

        Raises:
            AuthenticationError: credential missing, nothing was sent
            APIError: non-2xx status
            DecodeError: 2xx status with an unreadable body
            httpx.TransportError: propagated unchanged
        """
        try:
            return await self._invoke(model_identifier, prompt, credential)
        except Exception as e:
            logger.error(f"LLM Call Failed: {e!r}")
            raise

    async def _invoke(self, model_identifier: str, prompt: str, credential: Optional[str]) -> str:
        if not credential:
            raise AuthenticationError(MISSING_KEY_MESSAGE)

        payload = AIRequest(model_name=model_identifier, prompt=prompt).model_dump()
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {credential}",
        }

        logger.info(f"Calling AI service with model: {model_identifier}, prompt length: {len(prompt)}")
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Request data: {json.dumps(payload, ensure_ascii=False)[:500]}")

        resp = await self._post(payload, headers)

        if not resp.is_success:
            raise _api_error_from(resp)

        text = _extract_response_text(resp)
        logger.info(f"AI service responded for model: {model_identifier}, response length: {len(text)}")
        return text

    async def _post(self, payload: Dict[str, Any], headers: Dict[str, str]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(
                self.api_url, json=payload, headers=headers, timeout=self.timeout
            )

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.post(self.api_url, json=payload, headers=headers)


async def invoke(
    model_identifier: str,
    prompt: str,
    credential: Optional[str],
    *,
    client: Optional[LLMClient] = None,
) -> str:
    """Module-level shortcut for ``LLMClient().invoke``."""
    return await (client or LLMClient()).invoke(model_identifier, prompt, credential)
