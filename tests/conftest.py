"""Pytest configuration and fixtures.

Repository and service tests run the SQLAlchemy repository on SQLite
in-memory; the in-memory repository is exercised side by side.
"""
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict
from uuid import UUID

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from promo_offers.domain.models import CreateOfferRequest, Offer, OfferType
from promo_offers.infrastructure.database import Base
from promo_offers.infrastructure.models import OfferModel  # noqa: F401
from promo_offers.infrastructure.repositories_inmemory import InMemoryOfferRepository
from promo_offers.infrastructure.repositories_postgres import PostgresOfferRepository
from promo_offers.services.offer_service import OfferService

NOW = datetime(2026, 3, 15, 12, 0, 0)


@pytest.fixture
async def async_session():
    """Create async session for testing with SQLite in-memory."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session_factory() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
def repository(async_session: AsyncSession) -> PostgresOfferRepository:
    """PostgreSQL repository fixture (with SQLite backend for tests)."""
    return PostgresOfferRepository(async_session)


@pytest.fixture
def in_memory_repository() -> InMemoryOfferRepository:
    """In-memory offer repository."""
    repo = InMemoryOfferRepository()
    yield repo
    repo.clear()


@pytest.fixture
def offer_service(repository: PostgresOfferRepository) -> OfferService:
    """Offer service backed by the SQL repository."""
    return OfferService(offer_repository=repository)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation instant."""
    return NOW


@pytest.fixture
def mock_offer_id() -> UUID:
    """Mock offer ID."""
    return UUID("123e4567-e89b-12d3-a456-426614174000")


@pytest.fixture
def mock_product_id() -> str:
    """Mock catalog product ID."""
    return "65a1f0c2e4b0a1b2c3d4e5f6"


@pytest.fixture
def offer_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for valid percentage-off creation payloads."""

    def _payload(**overrides: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": "Spring sale",
            "description": "20% off selected items",
            "offer_type": OfferType.PERCENTAGE_OFF,
            "rules": {"discount_percentage": Decimal("20")},
            "start_date": NOW - timedelta(days=1),
            "end_date": NOW + timedelta(days=7),
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def make_request(offer_payload: Callable[..., Dict[str, Any]]) -> Callable[..., CreateOfferRequest]:
    """Factory for CreateOfferRequest."""

    def _make(**overrides: Any) -> CreateOfferRequest:
        return CreateOfferRequest(**offer_payload(**overrides))

    return _make


@pytest.fixture
def make_offer(offer_payload: Callable[..., Dict[str, Any]]) -> Callable[..., Offer]:
    """Factory for stored-shape Offer instances."""

    def _make(**overrides: Any) -> Offer:
        return Offer(**offer_payload(**overrides))

    return _make


@pytest.fixture
def sample_offer(make_offer: Callable[..., Offer]) -> Offer:
    """Sample offer."""
    return make_offer()
