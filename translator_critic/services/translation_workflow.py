"""
Translation Workflow

Runs the two-stage pipeline for one piece of user text:
- translate it with the translation model
- have the critique model grade that translation

The run is an explicit state machine::

    IDLE -> VALIDATING -> TRANSLATING -> CRITIQUING -> DONE
                 \\              \\              \\
                  +--------------+--------------+--> FAILED

Every transition and every published result is reported to the registered
listeners in order. A failed critique keeps the translation.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..config import get_settings
from ..llm.client import LLMClient
from ..llm.models import DEFAULT_TARGET_LANGUAGE, MODELS
from ..llm.prompts import build_critique_prompt, build_translation_prompt
from ..utils.exceptions import (
    TranslatorCriticError,
    ValidationError,
    WorkflowBusyError,
    log_error,
)

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter some text to translate."
CANCELLED_MESSAGE = "The translation run was cancelled."

EventListener = Callable[[str, Dict[str, Any]], Any]


class WorkflowStatus(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    TRANSLATING = "translating"
    CRITIQUING = "critiquing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class WorkflowResult:
    """Outcome of a fully successful run."""
    translation: str
    critique: str


def error_message(error: BaseException) -> str:
    """Human-readable message for any error a run can end with."""
    if isinstance(error, TranslatorCriticError):
        return error.message
    if isinstance(error, asyncio.CancelledError):
        return CANCELLED_MESSAGE
    return str(error) or error.__class__.__name__


def error_code(error: BaseException) -> str:
    if isinstance(error, TranslatorCriticError):
        return error.error_code
    if isinstance(error, asyncio.CancelledError):
        return "CANCELLED"
    return "TRANSPORT_ERROR"


class TranslationWorkflow:
    """
    Sequences the translate and critique calls for one user action.

    One run at a time per instance; starting a second run while the first is
    awaiting the network raises ``WorkflowBusyError``. State from the previous
    run is discarded when the next one starts.
    """

    def __init__(self, client: Optional[LLMClient] = None, on_event: Optional[EventListener] = None):
        self.client = client or LLMClient()
        self._listeners: List[EventListener] = []
        if on_event is not None:
            self._listeners.append(on_event)

        self.status = WorkflowStatus.IDLE
        self.input_text = ""
        self.target_language = DEFAULT_TARGET_LANGUAGE
        self.translation: Optional[str] = None
        self.critique: Optional[str] = None
        self.error: Optional[BaseException] = None
        self._running = False

    def subscribe(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    @property
    def is_running(self) -> bool:
        return self._running

    def snapshot(self) -> Dict[str, Any]:
        """Current state as a plain dict, suitable for JSON."""
        return {
            "status": self.status.value,
            "input_text": self.input_text,
            "target_language": self.target_language,
            "translation": self.translation,
            "critique": self.critique,
            "error": error_message(self.error) if self.error is not None else None,
        }

    async def run(
        self,
        input_text: str,
        target_language: Optional[str] = None,
        credential: Optional[str] = None,
    ) -> WorkflowResult:
        """Translate ``input_text`` and critique the result.

        Raises whatever stopped the run: ``ValidationError`` for empty input,
        otherwise the error from the failing LLM call, unchanged.
        """
        if self._running:
            raise WorkflowBusyError()
        self._running = True
        try:
            return await self._run(
                input_text,
                target_language or DEFAULT_TARGET_LANGUAGE,
                credential or get_settings().api_key,
            )
        finally:
            self._running = False

    async def _run(self, input_text: str, target_language: str, credential: Optional[str]) -> WorkflowResult:
        self._reset(input_text, target_language)
        try:
            self._set_status(WorkflowStatus.VALIDATING)
            if not input_text.strip():
                raise ValidationError(EMPTY_INPUT_MESSAGE, field="text")

            self._set_status(WorkflowStatus.TRANSLATING)
            translation = await self.client.invoke(
                MODELS.TRANSLATE,
                build_translation_prompt(input_text, target_language),
                credential,
            )
            self.translation = translation
            self._emit("translation", {"translation": translation, "target_language": target_language})

            self._set_status(WorkflowStatus.CRITIQUING)
            critique = await self.client.invoke(
                MODELS.CRITIQUE,
                build_critique_prompt(input_text, translation),
                credential,
            )
            self.critique = critique
            self._emit("critique", {"critique": critique})

            self._set_status(WorkflowStatus.DONE)
            return WorkflowResult(translation=translation, critique=critique)
        except (Exception, asyncio.CancelledError) as e:
            self._fail(e)
            raise

    def _reset(self, input_text: str, target_language: str) -> None:
        self.input_text = input_text
        self.target_language = target_language
        self.translation = None
        self.critique = None
        self.error = None
        self._set_status(WorkflowStatus.IDLE)

    def _fail(self, error: BaseException) -> None:
        failed_in = self.status
        self.error = error
        self._set_status(WorkflowStatus.FAILED)
        if isinstance(error, TranslatorCriticError):
            log_error(error, logger, level="warning", stage=failed_in.value)
        else:
            logger.warning(
                f"Translation run failed during {failed_in.value}: {error_code(error)}: {error_message(error)}"
            )
        self._emit("error", {
            "message": error_message(error),
            "error_code": error_code(error),
            "stage": failed_in.value,
            "translation": self.translation,
        })

    def _set_status(self, status: WorkflowStatus) -> None:
        self.status = status
        logger.debug(f"Workflow state -> {status.value}")
        self._emit("state", {"status": status.value})

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event_type, data)
            except Exception as e:
                logger.warning(f"Workflow listener failed on {event_type}: {e}")
