"""Assistant API router: chat, interview preparation and resume review."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.core.config import Settings, get_settings
from app.modules.assistant.schemas import (
    ChatRequest,
    ChatResponse,
    ExplanationRead,
    ExplanationRequest,
    QuestionsRequest,
    QuestionsResponse,
    ResumeReviewRead,
)
from app.modules.assistant.service import AssistantService, get_assistant_service
from app.shared.exceptions import InvalidUploadException, PayloadTooLargeException

router = APIRouter(prefix="/ai", tags=["assistant"])

PDF_MIME_TYPE = "application/pdf"


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    service: AssistantService = Depends(get_assistant_service),
) -> ChatResponse:
    return ChatResponse(response=await service.chat(payload.message))


@router.post("/generate-questions", response_model=QuestionsResponse)
async def generate_questions(
    payload: QuestionsRequest,
    service: AssistantService = Depends(get_assistant_service),
) -> QuestionsResponse:
    """Generate interview questions with answers for a role."""
    questions = await service.generate_questions(
        role=payload.role,
        experience=payload.experience,
        topics_to_focus=payload.topics_to_focus,
        number_of_questions=payload.number_of_questions,
    )
    return QuestionsResponse(questions=questions)


@router.post("/generate-explanation", response_model=ExplanationRead)
async def generate_explanation(
    payload: ExplanationRequest,
    service: AssistantService = Depends(get_assistant_service),
) -> ExplanationRead:
    """Explain an interview question in depth."""
    return await service.generate_explanation(payload.question)


@router.post("/review-resume", response_model=ResumeReviewRead)
async def review_resume(
    resume: UploadFile = File(...),
    job_role: str = Form(..., alias="jobRole", min_length=1),
    experience: str = Form(..., min_length=1),
    job_description: str = Form(..., alias="jobDescription", min_length=1),
    service: AssistantService = Depends(get_assistant_service),
    settings: Settings = Depends(get_settings),
) -> ResumeReviewRead:
    """Review an uploaded PDF resume against a job description."""
    if resume.content_type != PDF_MIME_TYPE:
        raise InvalidUploadException("Only PDF files are allowed!")

    content = await resume.read(settings.resume_max_bytes + 1)
    if len(content) > settings.resume_max_bytes:
        max_mb = settings.resume_max_bytes // (1024 * 1024)
        raise PayloadTooLargeException(f"File is too large. Max size is {max_mb}MB.")

    review = await service.review_resume(
        job_role=job_role,
        experience=experience,
        job_description=job_description,
        resume=content,
        mime_type=PDF_MIME_TYPE,
    )
    return ResumeReviewRead(review=review)
