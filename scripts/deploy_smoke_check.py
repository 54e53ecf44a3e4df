"""Post-deploy smoke checks executed from the app container."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from datetime import UTC, datetime
from uuid import uuid4

BASE_URL = "http://localhost:8000"
API_PREFIX = "/api/v1"
FREE_DEMO_COURSE_ID = "demo-intro-python"


def request(
    path: str,
    *,
    method: str = "GET",
    body: dict | None = None,
    expected: int = 200,
) -> bytes:
    payload = None
    req_headers = {"Accept": "application/json"}
    if body is not None:
        payload = json.dumps(body).encode("utf-8")
        req_headers["Content-Type"] = "application/json"

    request_obj = urllib.request.Request(
        f"{BASE_URL}{path}",
        data=payload,
        method=method,
        headers=req_headers,
    )
    try:
        with urllib.request.urlopen(request_obj, timeout=30) as response:
            content = response.read()
            status = response.getcode()
    except urllib.error.HTTPError as exc:  # pragma: no cover - runtime smoke script
        body_text = exc.read().decode("utf-8", errors="ignore")
        raise RuntimeError(f"{method} {path} -> {exc.code}: {body_text}") from exc

    if status != expected:
        raise RuntimeError(f"{method} {path} -> {status}, expected {expected}")
    return content


def main() -> None:
    for endpoint in ["/health", "/ready", "/docs", "/metrics"]:
        request(endpoint, expected=200)

    # Free enrollment touches orders, enrollments and roster without calling PayPal.
    user_id = f"deploy-smoke-{uuid4().hex[:10]}"
    created = json.loads(
        request(
            f"{API_PREFIX}/student/order/create",
            method="POST",
            body={
                "userId": user_id,
                "userName": "Deploy Smoke",
                "userEmail": f"{user_id}@learnhub.dev",
                "courseId": FREE_DEMO_COURSE_ID,
                "courseTitle": "Intro to Python",
                "instructorId": "demo-instructor",
                "instructorName": "Demo Instructor",
                "coursePricing": "0",
                "orderDate": datetime.now(UTC).isoformat(),
            },
            expected=201,
        ).decode("utf-8")
    )
    if created["data"]["approveUrl"] is not None:
        raise RuntimeError("Free course order returned an approval URL")

    purchase = json.loads(
        request(
            f"{API_PREFIX}/student/courses-bought/{user_id}/courses/{FREE_DEMO_COURSE_ID}",
        ).decode("utf-8")
    )
    if not purchase["data"]["purchased"]:
        raise RuntimeError("Free course enrollment is not visible")

    print("Smoke checks passed.")


if __name__ == "__main__":
    main()
