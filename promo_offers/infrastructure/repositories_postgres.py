"""PostgreSQL repository implementation."""
import logging
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from promo_offers.domain.models import Offer
from promo_offers.domain.ordering import ORDER_BY
from promo_offers.infrastructure.models import OfferModel
from promo_offers.infrastructure.repositories import OfferRepository

logger = logging.getLogger(__name__)


def _order_clauses():
    """ORDER BY clauses for the shared ordering policy."""
    clauses = []
    for field, descending in ORDER_BY:
        column = getattr(OfferModel, field)
        clauses.append(column.desc() if descending else column.asc())
    return clauses


class PostgresOfferRepository(OfferRepository):
    """PostgreSQL implementation of offer repository.

    Works with any SQLAlchemy async dialect; tests run it on SQLite.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_domain(self, model: OfferModel) -> Offer:
        """Convert SQLAlchemy model to domain model."""
        return Offer.model_validate(model)

    def _apply(self, model: OfferModel, offer: Offer) -> OfferModel:
        """Copy domain fields onto a SQLAlchemy model."""
        data = offer.model_dump()
        data["rules"] = offer.rules.model_dump(mode="json", exclude_none=True)
        for field, value in data.items():
            setattr(model, field, value)
        return model

    async def _get_model(self, offer_id: UUID) -> Optional[OfferModel]:
        stmt = select(OfferModel).where(OfferModel.offer_id == offer_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, offer: Offer) -> Offer:
        """Create a new offer."""
        model = self._apply(OfferModel(), offer)
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)

        logger.info(f"Created offer {offer.offer_id} in database")
        return self._to_domain(model)

    async def get_by_id(self, offer_id: UUID) -> Optional[Offer]:
        """Get offer by ID."""
        model = await self._get_model(offer_id)

        if model is None:
            return None

        return self._to_domain(model)

    async def list_page(
        self, offset: int, limit: int, is_active: Optional[bool] = None
    ) -> Tuple[List[Offer], int]:
        """Get a slice of offers and the total count matching the filter."""
        filters = []
        if is_active is not None:
            filters.append(OfferModel.is_active == is_active)

        stmt = (
            select(OfferModel)
            .where(*filters)
            .order_by(*_order_clauses())
            .offset(offset)
            .limit(limit)
        )
        count_stmt = select(func.count()).select_from(OfferModel).where(*filters)

        result = await self.session.execute(stmt)
        models = result.scalars().all()
        total = (await self.session.execute(count_stmt)).scalar_one()

        return [self._to_domain(model) for model in models], total

    async def update(self, offer: Offer) -> Optional[Offer]:
        """Replace the stored offer (last writer wins)."""
        model = await self._get_model(offer.offer_id)

        if model is None:
            logger.warning(f"Offer {offer.offer_id} vanished before update")
            return None

        self._apply(model, offer)
        await self.session.flush()

        logger.info(f"Updated offer {offer.offer_id} in database")
        return self._to_domain(model)

    async def delete(self, offer_id: UUID) -> None:
        """Delete offer."""
        stmt = delete(OfferModel).where(OfferModel.offer_id == offer_id)
        await self.session.execute(stmt)
        await self.session.flush()

        logger.info(f"Deleted offer {offer_id} from database")

    async def get_active(self, now: datetime) -> List[Offer]:
        """Get enabled offers whose validity window contains ``now``."""
        stmt = (
            select(OfferModel)
            .where(
                OfferModel.is_active.is_(True),
                OfferModel.start_date <= now,
                OfferModel.end_date >= now,
            )
            .order_by(*_order_clauses())
        )
        result = await self.session.execute(stmt)
        models = result.scalars().all()

        return [self._to_domain(model) for model in models]
