"""Generative AI client used by the assistant endpoints."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import google.generativeai as genai
from fastapi import Request
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import BlockedPromptException, StopCandidateException

from app.core.enums import GenerationErrorKind

logger = logging.getLogger(__name__)

Part = str | dict[str, Any]


class GenerationError(Exception):
    """Generative provider call failed with a known ``kind``."""

    def __init__(self, kind: GenerationErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)


class GenerativeClient(Protocol):
    async def generate(self, parts: list[Part]) -> str:
        """Return model text for the given prompt parts."""


def classify_provider_error(exc: Exception) -> GenerationErrorKind:
    """Map a provider exception to an error kind by its type."""
    if isinstance(exc, (BlockedPromptException, StopCandidateException)):
        return GenerationErrorKind.BLOCKED
    if isinstance(exc, google_exceptions.ResourceExhausted):
        return GenerationErrorKind.QUOTA
    if isinstance(exc, (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied)):
        return GenerationErrorKind.AUTH
    if isinstance(exc, google_exceptions.InvalidArgument):
        if getattr(exc, "reason", None) == "API_KEY_INVALID":
            return GenerationErrorKind.AUTH
        return GenerationErrorKind.INVALID_RESPONSE
    return GenerationErrorKind.UNAVAILABLE


class GeminiClient:
    """``google-generativeai`` backed client bound to one model."""

    def __init__(self, api_key: str, model_name: str) -> None:
        genai.configure(api_key=api_key)
        self.model_name = model_name
        self._model = genai.GenerativeModel(model_name)

    async def generate(self, parts: list[Part]) -> str:
        try:
            response = await self._model.generate_content_async(parts)
        except (
            google_exceptions.GoogleAPIError,
            BlockedPromptException,
            StopCandidateException,
        ) as exc:
            kind = classify_provider_error(exc)
            logger.error("Gemini %s call failed (%s): %r", self.model_name, kind, exc)
            raise GenerationError(kind, "Generative model call failed") from exc

        try:
            return response.text
        except ValueError as exc:
            # No usable candidate, typically a safety stop.
            logger.warning("Gemini %s returned no text: %r", self.model_name, exc)
            raise GenerationError(GenerationErrorKind.BLOCKED, "Model returned no text") from exc


class UnconfiguredGenerativeClient:
    """Stand-in used when no API key is configured."""

    async def generate(self, parts: list[Part]) -> str:
        raise GenerationError(GenerationErrorKind.AUTH, "GEMINI_API_KEY is not configured")


def get_generative_client(request: Request) -> GenerativeClient:
    """Dependency provider returning the client built at startup."""
    return request.app.state.generative_client
