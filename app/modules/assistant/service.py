"""Assistant business logic: prompt building and reply parsing."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from fastapi import Depends
from pydantic import ValidationError

from app.core.enums import GenerationErrorKind
from app.modules.assistant.client import (
    GenerationError,
    GenerativeClient,
    Part,
    get_generative_client,
)
from app.modules.assistant.prompts import (
    EXPLANATION_PROMPT,
    QUESTIONS_PROMPT,
    RESUME_REVIEW_PROMPT,
)
from app.modules.assistant.schemas import ExplanationRead, InterviewQuestion
from app.shared.exceptions import AssistantUnavailableException, UpstreamRateLimitedException

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```(?:json)?\n?")


def parse_json_reply(text: str) -> Any:
    """Decode a JSON model reply, tolerating markdown code fences around it."""
    cleaned = _CODE_FENCE_RE.sub("", text).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error("Model reply is not valid JSON: %r", text)
        raise GenerationError(
            GenerationErrorKind.INVALID_RESPONSE,
            "Invalid JSON response from AI",
        ) from exc


class AssistantService:
    """Interview preparation and resume review on top of a generative model."""

    def __init__(self, client: GenerativeClient) -> None:
        self.client = client

    async def _generate(self, parts: list[Part], action: str) -> str:
        try:
            return await self.client.generate(parts)
        except GenerationError as exc:
            raise self._translate(exc, action) from exc

    @staticmethod
    def _translate(exc: GenerationError, action: str) -> Exception:
        logger.warning("Assistant %s failed: %s (%s)", action, exc.message, exc.kind)
        if exc.kind == GenerationErrorKind.QUOTA:
            return UpstreamRateLimitedException(
                "The assistant is busy right now. Please try again later.",
            )
        return AssistantUnavailableException(f"Failed to {action}.")

    async def chat(self, message: str) -> str:
        return await self._generate([message], "get response from assistant")

    async def generate_questions(
        self,
        role: str,
        experience: str,
        topics_to_focus: str,
        number_of_questions: int,
    ) -> list[InterviewQuestion]:
        """Generate interview questions with answers, numbered from 1."""
        action = "generate questions"
        prompt = QUESTIONS_PROMPT.format(
            role=role,
            experience=experience,
            topics=topics_to_focus,
            count=number_of_questions,
        )
        text = await self._generate([prompt], action)
        try:
            items = parse_json_reply(text)
            if not isinstance(items, list):
                raise GenerationError(
                    GenerationErrorKind.INVALID_RESPONSE,
                    "Expected a JSON array of questions",
                )
            return [
                InterviewQuestion(
                    id=index,
                    question=item["question"],
                    answer=item["answer"],
                    is_pinned=False,
                )
                for index, item in enumerate(items, start=1)
            ]
        except (KeyError, TypeError, ValidationError) as exc:
            error = GenerationError(GenerationErrorKind.INVALID_RESPONSE, "Malformed question item")
            raise self._translate(error, action) from exc
        except GenerationError as exc:
            raise self._translate(exc, action) from exc

    async def generate_explanation(self, question: str) -> ExplanationRead:
        action = "generate explanation"
        text = await self._generate([EXPLANATION_PROMPT.format(question=question)], action)
        try:
            return ExplanationRead.model_validate(parse_json_reply(text))
        except ValidationError as exc:
            error = GenerationError(GenerationErrorKind.INVALID_RESPONSE, "Malformed explanation")
            raise self._translate(error, action) from exc
        except GenerationError as exc:
            raise self._translate(exc, action) from exc

    async def review_resume(
        self,
        job_role: str,
        experience: str,
        job_description: str,
        resume: bytes,
        mime_type: str,
    ) -> str:
        """Review a resume document against a job description, as Markdown."""
        prompt = RESUME_REVIEW_PROMPT.format(
            job_role=job_role,
            experience=experience,
            job_description=job_description,
        )
        return await self._generate(
            [prompt, {"mime_type": mime_type, "data": resume}],
            "review the resume",
        )


async def get_assistant_service(
    client: GenerativeClient = Depends(get_generative_client),
) -> AssistantService:
    """Dependency provider for assistant service."""
    return AssistantService(client)
