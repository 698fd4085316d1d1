"""
Pytest configuration and fixtures
Shared test setup for all test modules
"""
import os

# Settings are read at import time; point them at throwaway values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["EZEE_LICENCE_KEY"] = "test-licence"
os.environ["EZEE_SITE"] = "learnhub.test"
os.environ["SITE_URL"] = "https://learnhub.test"
os.environ["INVOICE_TAX_RATE_PERCENT"] = "0"

import json
from decimal import Decimal
from typing import AsyncGenerator, Callable, Dict
from urllib.parse import parse_qs

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from learnhub.main import app
from learnhub.api.dependencies import get_payment_gateway
from learnhub.core.security import create_access_token
from learnhub.db.base import Base
from learnhub.db.database import get_db
from learnhub.db.models import Company, Course, CoursePricing, Profile
from learnhub.services.ezee_payments_service import EzeePaymentsService

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database for each test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


class GatewayRecorder:
    """Stands in for the eZeePayments API; records every request it receives"""

    def __init__(self):
        self.requests = []
        self.token_response: Dict = {"result": {"status": 1, "token": "tok_test_123"}}
        self.status_code = 200

    def handler(self, request: httpx.Request) -> httpx.Response:
        form = {key: values[0] for key, values in parse_qs(request.content.decode()).items()}
        self.requests.append({"path": request.url.path, "headers": request.headers, "form": form})
        return httpx.Response(self.status_code, content=json.dumps(self.token_response))


@pytest.fixture
def gateway_recorder() -> GatewayRecorder:
    return GatewayRecorder()


@pytest.fixture
def gateway(gateway_recorder: GatewayRecorder) -> EzeePaymentsService:
    """Gateway client backed by an in-process mock transport"""
    return EzeePaymentsService(transport=httpx.MockTransport(gateway_recorder.handler))


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession, gateway: EzeePaymentsService) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create test client with database and gateway overrides"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def company(db_session: AsyncSession) -> Company:
    company = Company(name="Acme Training Ltd")
    db_session.add(company)
    await db_session.commit()
    return company


@pytest.fixture
async def other_company(db_session: AsyncSession) -> Company:
    company = Company(name="Globex Learning")
    db_session.add(company)
    await db_session.commit()
    return company


@pytest.fixture
async def course(db_session: AsyncSession) -> Course:
    course = Course(title="Workplace Safety")
    db_session.add(course)
    await db_session.commit()
    return course


@pytest.fixture
async def course_pricing(db_session: AsyncSession, course: Course) -> CoursePricing:
    """setup 500, reactivation 250, seat 10 USD"""
    pricing = CoursePricing(
        course_id=course.id,
        setup_fee=Decimal("500.00"),
        reactivation_fee=Decimal("250.00"),
        seat_fee=Decimal("10.00"),
        currency="USD",
    )
    db_session.add(pricing)
    await db_session.commit()
    return pricing


async def _profile(db_session: AsyncSession, email: str, role: str, company_id=None) -> Profile:
    profile = Profile(email=email, full_name=email.split("@")[0].title(), role=role, company_id=company_id)
    db_session.add(profile)
    await db_session.commit()
    return profile


@pytest.fixture
async def company_admin(db_session: AsyncSession, company: Company) -> Profile:
    return await _profile(db_session, "admin@acme.test", "company_admin", company.id)


@pytest.fixture
async def company_user(db_session: AsyncSession, company: Company) -> Profile:
    return await _profile(db_session, "learner@acme.test", "user", company.id)


@pytest.fixture
async def outsider_admin(db_session: AsyncSession, other_company: Company) -> Profile:
    return await _profile(db_session, "admin@globex.test", "company_admin", other_company.id)


@pytest.fixture
async def super_admin(db_session: AsyncSession) -> Profile:
    return await _profile(db_session, "ops@learnhub.test", "super_admin")


@pytest.fixture
def auth_headers() -> Callable[[Profile], dict]:
    """Generate auth headers for a profile"""

    def make(profile: Profile) -> dict:
        access_token = create_access_token(data={"sub": str(profile.id)})
        return {"Authorization": f"Bearer {access_token}"}

    return make
