from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse

from ..deps import get_credential, get_llm_client
from ..llm.client import LLMClient
from ..llm.models import LANGUAGES, MODELS
from ..schemas import (
    ErrorResponse,
    LanguageOut,
    LanguagesOut,
    ModelsOut,
    TranslateCritiqueIn,
    TranslateCritiqueOut,
)
from ..services.notification_service import SSE_HEADERS, RunEventQueue
from ..services.translation_workflow import TranslationWorkflow, error_code, error_message
from ..utils.exceptions import (
    APIError,
    AuthenticationError,
    DecodeError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["translation"])


def _http_status_for(error: Exception) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, (APIError, DecodeError)):
        return 502
    return 503


def _error_response(error: Exception, translation: Optional[str]) -> JSONResponse:
    body = ErrorResponse(
        message=error_message(error),
        details={"error_code": error_code(error), "translation": translation},
    )
    return JSONResponse(status_code=_http_status_for(error), content=body.model_dump())


@router.get("/languages", response_model=LanguagesOut)
def list_languages() -> LanguagesOut:
    return LanguagesOut(languages=[LanguageOut(value=l.value, label=l.label) for l in LANGUAGES])


@router.get("/models", response_model=ModelsOut)
def list_models() -> ModelsOut:
    return ModelsOut(translate=MODELS.TRANSLATE, critique=MODELS.CRITIQUE)


@router.post("/translate-critique")
async def translate_critique(
    payload: TranslateCritiqueIn,
    credential: Optional[str] = Depends(get_credential),
    client: LLMClient = Depends(get_llm_client),
):
    workflow = TranslationWorkflow(client=client)
    try:
        result = await workflow.run(payload.text, payload.target_language, credential)
    except (
        ValidationError,
        AuthenticationError,
        APIError,
        DecodeError,
        httpx.HTTPError,
    ) as e:
        return _error_response(e, workflow.translation)

    return TranslateCritiqueOut(translation=result.translation, critique=result.critique)


@router.post("/translate-critique/stream")
async def translate_critique_stream(
    payload: TranslateCritiqueIn,
    credential: Optional[str] = Depends(get_credential),
    client: LLMClient = Depends(get_llm_client),
) -> StreamingResponse:
    """
    SSE endpoint streaming the run: ``state`` transitions, the ``translation``
    as soon as stage 1 finishes, then ``critique`` or ``error``, and a final
    ``done`` snapshot.
    """
    events = RunEventQueue()
    workflow = TranslationWorkflow(client=client, on_event=events.put)

    async def _drive() -> None:
        try:
            await workflow.run(payload.text, payload.target_language, credential)
        except (
            ValidationError,
            AuthenticationError,
            APIError,
            DecodeError,
            httpx.HTTPError,
        ) as e:
            # already delivered to the client as an "error" event
            logger.info(f"Streamed run ended with {error_code(e)}")
        finally:
            events.put("done", workflow.snapshot())
            events.close()

    async def event_stream():
        task = asyncio.create_task(_drive())
        try:
            async for frame in events.stream():
                yield frame
        except asyncio.CancelledError:
            logger.debug("SSE connection cancelled")
            raise
        finally:
            if not task.done():
                task.cancel()
            (outcome,) = await asyncio.gather(task, return_exceptions=True)
            if isinstance(outcome, Exception):
                logger.error(f"Streamed run crashed: {outcome!r}")
            logger.debug("SSE connection closed")

    return StreamingResponse(
        content=event_stream(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
