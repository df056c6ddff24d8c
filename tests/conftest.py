"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from credit_simulator.api.main import create_app
from credit_simulator.infrastructure.database.models import Base
from credit_simulator.infrastructure.database.session import get_db
from credit_simulator.domain.models import CreditProduct, CreditType, CreditFormData


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_product(**overrides) -> CreditProduct:
    """Personal loan product that a mid-income applicant qualifies for"""
    fields = dict(
        id="p1",
        family=CreditType.PERSONAL,
        institution_code=11,
        institution_name="Banco de la Nación Argentina",
        name="Préstamo Personal",
        denomination="Pesos",
        min_income=100_000,
        min_tenure_months=6,
        max_payment_to_income=0.35,
        max_annual_rate=0.60,
        max_total_financial_cost=0.80,
        max_amount=5_000_000,
        min_amount=50_000,
        max_term_months=72,
        max_age=75,
        max_ltv=None,
        reference_payment=None,
    )
    fields.update(overrides)
    return CreditProduct(**fields)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def personal_form() -> CreditFormData:
    """Applicant asking for a 1,000,000 personal loan over 24 months"""
    return CreditFormData(
        product_type=CreditType.PERSONAL,
        amount=1_000_000,
        monthly_income=800_000,
        age=35,
        tenure_months=24,
        term_months=24,
    )


@pytest.fixture
def sample_products() -> list[CreditProduct]:
    """Small personal-loan catalog with one cheap, one pricey, one out-of-reach product"""
    return [
        make_product(id="p1", institution_code=11, max_annual_rate=0.60),
        make_product(
            id="p2",
            institution_code=7,
            institution_name="Banco de Galicia",
            name="Préstamo UVA",
            denomination="UVA",
            max_annual_rate=0.12,
        ),
        make_product(id="p3", institution_code=72, institution_name="Banco Santander", min_income=2_000_000),
    ]
