"""In-memory repository implementation for development/testing."""
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from promo_offers.domain.models import Offer
from promo_offers.domain.ordering import sort_offers
from promo_offers.infrastructure.repositories import OfferRepository


class InMemoryOfferRepository(OfferRepository):
    """In-memory implementation of offer repository."""

    def __init__(self) -> None:
        self._offers: Dict[UUID, Offer] = {}

    async def create(self, offer: Offer) -> Offer:
        """Create a new offer."""
        self._offers[offer.offer_id] = offer.model_copy(deep=True)
        return offer

    async def get_by_id(self, offer_id: UUID) -> Optional[Offer]:
        """Get offer by ID."""
        offer = self._offers.get(offer_id)
        if offer is None:
            return None
        return offer.model_copy(deep=True)

    async def list_page(
        self, offset: int, limit: int, is_active: Optional[bool] = None
    ) -> Tuple[List[Offer], int]:
        """Get a slice of offers and the total count matching the filter."""
        matching = [
            offer
            for offer in self._offers.values()
            if is_active is None or offer.is_active == is_active
        ]
        page = sort_offers(matching)[offset:offset + limit]
        return [offer.model_copy(deep=True) for offer in page], len(matching)

    async def update(self, offer: Offer) -> Optional[Offer]:
        """Replace the stored offer (last writer wins)."""
        if offer.offer_id not in self._offers:
            return None
        self._offers[offer.offer_id] = offer.model_copy(deep=True)
        return offer

    async def delete(self, offer_id: UUID) -> None:
        """Delete offer."""
        self._offers.pop(offer_id, None)

    async def get_active(self, now: datetime) -> List[Offer]:
        """Get enabled offers whose validity window contains ``now``."""
        active = [offer for offer in self._offers.values() if offer.is_active_at(now)]
        return [offer.model_copy(deep=True) for offer in sort_offers(active)]

    def clear(self) -> None:
        """Clear all data (for testing)."""
        self._offers.clear()
