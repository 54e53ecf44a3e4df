"""Assistant schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from app.shared.schemas import CamelModel


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=8000)


class ChatResponse(BaseModel):
    response: str


class QuestionsRequest(CamelModel):
    """Interview question generation request."""

    role: str = Field(min_length=1, max_length=255)
    experience: str = Field(min_length=1, max_length=64)
    topics_to_focus: str = Field(min_length=1, max_length=1000)
    number_of_questions: int = Field(default=5, ge=1, le=20)


class InterviewQuestion(CamelModel):
    id: int
    question: str
    answer: str
    is_pinned: bool = False


class QuestionsResponse(BaseModel):
    questions: list[InterviewQuestion]


class ExplanationRequest(BaseModel):
    question: str = Field(min_length=1, max_length=4000)


class ExplanationRead(BaseModel):
    title: str
    explanation: str


class ResumeReviewRead(BaseModel):
    success: bool = True
    review: str
