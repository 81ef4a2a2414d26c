"""Wire payloads for the AI service and request/response bodies of our own API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class AIRequest(BaseModel):
    """Body POSTed to the AI service."""

    model_name: str
    prompt: str


class AIResponse(BaseModel):
    """Body returned by the AI service on success."""

    response: str


class TranslateCritiqueIn(BaseModel):
    text: str
    target_language: Optional[str] = None


class TranslateCritiqueOut(BaseModel):
    status: str = Field("ok", description="Always 'ok' for success")
    translation: str
    critique: str


class LanguageOut(BaseModel):
    value: str
    label: str


class ModelsOut(BaseModel):
    translate: str
    critique: str


class ErrorResponse(BaseModel):
    """Standard error response format."""

    status: str = Field("error", description="Always 'error' for errors")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        None, description="Additional error details (optional)"
    )


class LanguagesOut(BaseModel):
    languages: List[LanguageOut]
