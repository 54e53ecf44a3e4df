"""Seed idempotent demo courses for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.modules.courses.models import Course

DEMO_INSTRUCTOR_ID = "demo-instructor"
DEMO_INSTRUCTOR_NAME = "Demo Instructor"


@dataclass(frozen=True, slots=True)
class DemoCourse:
    id: str
    title: str
    pricing: Decimal
    image: str | None = None


DEMO_COURSES = (
    DemoCourse(id="demo-intro-python", title="Intro to Python", pricing=Decimal("0")),
    DemoCourse(id="demo-system-design", title="System Design Interviews", pricing=Decimal("499.00")),
    DemoCourse(id="demo-data-structures", title="Data Structures in Practice", pricing=Decimal("999.00")),
)


@dataclass(slots=True)
class SeedStats:
    courses_created: int = 0
    courses_updated: int = 0


async def _ensure_course(session: AsyncSession, demo: DemoCourse) -> bool:
    course = await session.get(Course, demo.id)
    if course is None:
        session.add(
            Course(
                id=demo.id,
                title=demo.title,
                image=demo.image,
                instructor_id=DEMO_INSTRUCTOR_ID,
                instructor_name=DEMO_INSTRUCTOR_NAME,
                pricing=demo.pricing,
            ),
        )
        await session.flush()
        return True

    course.title = demo.title
    course.image = demo.image
    course.instructor_id = DEMO_INSTRUCTOR_ID
    course.instructor_name = DEMO_INSTRUCTOR_NAME
    course.pricing = demo.pricing
    await session.flush()
    return False


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            for demo in DEMO_COURSES:
                if await _ensure_course(session, demo):
                    stats.courses_created += 1
                else:
                    stats.courses_updated += 1
            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Seed idempotent demo courses for LearnHub (one free, two paid).",
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Courses created: {stats.courses_created}")
    print(f"- Courses updated: {stats.courses_updated}")
    for demo in DEMO_COURSES:
        print(f"- {demo.id}: {demo.title} ({demo.pricing})")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
