from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio

from app.core.config import Settings, get_settings
from app.main import app
from app.modules.assistant.client import get_generative_client

PREFIX = "/api/v1/ai"


class EchoClient:
    def __init__(self) -> None:
        self.calls: list[list] = []

    async def generate(self, parts: list) -> str:
        self.calls.append(parts)
        return "### Overall Summary\nLooks good."


@pytest.fixture
def echo_client() -> EchoClient:
    return EchoClient()


@pytest_asyncio.fixture
async def client(echo_client: EchoClient) -> AsyncIterator[httpx.AsyncClient]:
    app.dependency_overrides[get_generative_client] = lambda: echo_client
    app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, resume_max_bytes=16)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
    app.dependency_overrides.clear()


def form_fields() -> dict[str, str]:
    return {"jobRole": "Backend Engineer", "experience": "Senior", "jobDescription": "APIs"}


@pytest.mark.asyncio
async def test_review_resume_accepts_small_pdf(
    client: httpx.AsyncClient,
    echo_client: EchoClient,
) -> None:
    response = await client.post(
        f"{PREFIX}/review-resume",
        data=form_fields(),
        files={"resume": ("cv.pdf", b"%PDF-1.7", "application/pdf")},
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "review": "### Overall Summary\nLooks good."}
    assert echo_client.calls[0][1]["data"] == b"%PDF-1.7"


@pytest.mark.asyncio
async def test_review_resume_rejects_non_pdf(client: httpx.AsyncClient, echo_client: EchoClient) -> None:
    response = await client.post(
        f"{PREFIX}/review-resume",
        data=form_fields(),
        files={"resume": ("cv.docx", b"PK..", "application/msword")},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Only PDF files are allowed!"
    assert echo_client.calls == []


@pytest.mark.asyncio
async def test_review_resume_rejects_oversized_file(client: httpx.AsyncClient) -> None:
    response = await client.post(
        f"{PREFIX}/review-resume",
        data=form_fields(),
        files={"resume": ("cv.pdf", b"%PDF" + b"0" * 64, "application/pdf")},
    )

    assert response.status_code == 413


@pytest.mark.asyncio
async def test_chat_requires_message(client: httpx.AsyncClient) -> None:
    response = await client.post(f"{PREFIX}/chat", json={"message": ""})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_chat_returns_model_text(client: httpx.AsyncClient) -> None:
    response = await client.post(f"{PREFIX}/chat", json={"message": "hi"})

    assert response.status_code == 200
    assert response.json() == {"response": "### Overall Summary\nLooks good."}
