"""Offer Service implementation."""
import logging
import math
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID

from promo_offers.domain.discounts import compute_discount, quote_discount
from promo_offers.domain.exceptions import OfferNotFoundException
from promo_offers.domain.models import (
    BestOfferResponse,
    CreateOfferRequest,
    DeleteOfferResponse,
    DiscountQuote,
    Offer,
    OfferListResponse,
    Pagination,
    UpdateOfferRequest,
    to_naive_utc,
    utcnow,
)
from promo_offers.domain.validation import merge_offer, validate_offer
from promo_offers.infrastructure.repositories import OfferRepository

logger = logging.getLogger(__name__)


class OfferService:
    """Service for managing promotional offers and evaluating discounts."""

    def __init__(self, offer_repository: OfferRepository):
        self.offer_repository = offer_repository

    async def create_offer(self, request: CreateOfferRequest) -> Offer:
        """Validate and store a new offer."""
        logger.info(f"Creating {request.offer_type.value} offer '{request.name}'")

        validate_offer(request)

        now = utcnow()
        offer = Offer(
            **request.model_dump(exclude={"rules"}),
            rules=request.rules,
            created_at=now,
            updated_at=now,
        )

        created_offer = await self.offer_repository.create(offer)

        logger.info(f"Created offer {created_offer.offer_id}")

        return created_offer

    async def list_offers(
        self, page: int = 1, limit: int = 10, is_active: Optional[bool] = None
    ) -> OfferListResponse:
        """Get a page of offers, optionally filtered by the active flag."""
        if page < 1:
            raise ValueError("page must be >= 1")
        if limit < 1:
            raise ValueError("limit must be >= 1")

        offers, total = await self.offer_repository.list_page(
            offset=(page - 1) * limit, limit=limit, is_active=is_active
        )

        return OfferListResponse(
            data=offers,
            pagination=Pagination(
                total=total,
                page=page,
                limit=limit,
                total_pages=math.ceil(total / limit),
            ),
        )

    async def get_offer(self, offer_id: UUID) -> Offer:
        """Get offer by ID."""
        offer = await self.offer_repository.get_by_id(offer_id)

        if offer is None:
            raise OfferNotFoundException(str(offer_id))

        return offer

    async def update_offer(self, offer_id: UUID, request: UpdateOfferRequest) -> Offer:
        """Merge supplied fields over the stored offer and re-validate."""
        logger.info(f"Updating offer {offer_id}")

        existing = await self.get_offer(offer_id)
        merged = merge_offer(existing, request)

        updated_offer = await self.offer_repository.update(merged)

        if updated_offer is None:
            # Deleted between the read and the write
            raise OfferNotFoundException(str(offer_id))

        logger.info(f"Updated offer {offer_id}")

        return updated_offer

    async def delete_offer(self, offer_id: UUID) -> DeleteOfferResponse:
        """Hard delete an offer."""
        offer = await self.get_offer(offer_id)
        await self.offer_repository.delete(offer_id)

        logger.info(f"Deleted offer {offer_id}")

        return DeleteOfferResponse(
            offer_id=offer_id,
            message=f"Offer {offer.name} has been deleted successfully",
        )

    async def get_active_offers(self, now: Optional[datetime] = None) -> List[Offer]:
        """Offers enabled and inside their validity window at ``now``."""
        moment = to_naive_utc(now) if now is not None else utcnow()
        return await self.offer_repository.get_active(moment)

    async def get_offers_for_product(
        self, product_id: str, now: Optional[datetime] = None
    ) -> List[Offer]:
        """Active offers scoped to ``product_id`` or not scoped to any product."""
        offers = await self.get_active_offers(now)
        return [offer for offer in offers if offer.applies_to_product(product_id)]

    async def get_best_offer_for_product(
        self,
        product_id: str,
        quantity: int,
        unit_price: Union[int, float, Decimal],
        now: Optional[datetime] = None,
    ) -> BestOfferResponse:
        """Applicable offer with the largest discount for a product line.

        Offers are scanned in priority order; on equal discounts the first
        one wins.
        """
        best_offer: Optional[Offer] = None
        max_discount = Decimal("0")

        for offer in await self.get_offers_for_product(product_id, now):
            discount = compute_discount(offer, quantity, unit_price)
            if discount > max_discount:
                max_discount = discount
                best_offer = offer

        return BestOfferResponse(
            product_id=product_id, offer=best_offer, discount=max_discount
        )

    async def quote_offer(
        self, offer_id: UUID, quantity: int, unit_price: Union[int, float, Decimal]
    ) -> DiscountQuote:
        """Evaluate a stored offer against a quantity and unit price."""
        offer = await self.get_offer(offer_id)
        return quote_discount(offer, quantity, unit_price)
