"""Abstract repository interface."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from promo_offers.domain.models import Offer


class OfferRepository(ABC):
    """Abstract offer repository interface.

    Listing methods return offers in the order defined by
    ``promo_offers.domain.ordering.ORDER_BY``.
    """

    @abstractmethod
    async def create(self, offer: Offer) -> Offer:
        """Create a new offer."""
        pass

    @abstractmethod
    async def get_by_id(self, offer_id: UUID) -> Optional[Offer]:
        """Get offer by ID."""
        pass

    @abstractmethod
    async def list_page(
        self, offset: int, limit: int, is_active: Optional[bool] = None
    ) -> Tuple[List[Offer], int]:
        """Get a slice of offers and the total count matching the filter."""
        pass

    @abstractmethod
    async def update(self, offer: Offer) -> Optional[Offer]:
        """Replace the stored offer with ``offer``.

        Returns None when the offer no longer exists; a deleted offer is
        never recreated.
        """
        pass

    @abstractmethod
    async def delete(self, offer_id: UUID) -> None:
        """Delete offer."""
        pass

    @abstractmethod
    async def get_active(self, now: datetime) -> List[Offer]:
        """Get enabled offers whose validity window contains ``now``."""
        pass
