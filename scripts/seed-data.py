# scripts/seed-data.py
"""Seed database with demo billing data"""
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from learnhub.db.database import async_session_local, init_db
from learnhub.db.repositories.company_repository import CompanyRepository, ProfileRepository
from learnhub.db.repositories.course_repository import CourseRepository
from learnhub.core.security import create_access_token
from learnhub.services.pricing_service import PricingService


async def seed_data():
    """Seed database with demo data"""
    await init_db()

    async with async_session_local() as session:
        company_repo = CompanyRepository(session)
        profile_repo = ProfileRepository(session)
        course_repo = CourseRepository(session)

        company = await company_repo.create({"name": "Acme Training Ltd"})
        course = await course_repo.create({"title": "Workplace Safety Basics"})

        admin = await profile_repo.create({
            "email": "admin@acme.example",
            "full_name": "Acme Admin",
            "company_id": company.id,
            "role": "company_admin",
        })
        super_admin = await profile_repo.create({
            "email": "ops@learnhub.example",
            "full_name": "LearnHub Ops",
            "role": "super_admin",
        })
        await session.commit()

        print(f"Created company: {company.name} ({company.id})")
        print(f"Created course: {course.title} ({course.id})")

        pricing_service = PricingService(session)
        await pricing_service.set_course_pricing(
            course.id,
            setup_fee=Decimal("500.00"),
            reactivation_fee=Decimal("250.00"),
            seat_fee=Decimal("10.00"),
        )
        print("Course pricing: setup 500.00, reactivation 250.00, seat 10.00 USD")

        print("\nBearer tokens:")
        print(f"company_admin: {create_access_token({'sub': str(admin.id)})}")
        print(f"super_admin:   {create_access_token({'sub': str(super_admin.id)})}")


if __name__ == "__main__":
    asyncio.run(seed_data())
