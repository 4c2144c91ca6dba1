"""API routes."""
import logging
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from prometheus_client import Counter, Histogram

from promo_offers.config import settings
from promo_offers.domain.exceptions import (
    DomainException,
    InvalidOfferRulesException,
    InvalidTimeWindowException,
    OfferNotFoundException,
)
from promo_offers.domain.models import (
    BestOfferResponse,
    CreateOfferRequest,
    DeleteOfferResponse,
    DiscountQuote,
    DiscountQuoteRequest,
    Offer,
    OfferListResponse,
    UpdateOfferRequest,
)
from promo_offers.services.offer_service import OfferService

from .dependencies import get_offer_service, require_offer_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/offers", tags=["offers"])

# Prometheus metrics
offer_write_counter = Counter(
    "offer_write_total", "Total number of offer writes", ["operation", "status"]
)
offer_read_counter = Counter(
    "offer_read_total", "Total number of offer reads", ["query", "status"]
)
discount_quote_counter = Counter(
    "offer_discount_quote_total", "Total number of discount evaluations", ["status"]
)
offer_query_duration = Histogram(
    "offer_query_duration_seconds", "Time spent answering offer queries", ["query"]
)


def _client_error(e: DomainException, status_code: int) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"code": e.code, "message": e.message},
    )


def _parse_flag(value: Optional[str]) -> Optional[bool]:
    """Tri-state query flag: "true", "false", or absent."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"code": "INTERNAL_ERROR", "message": "Internal server error"},
    )


@router.post("", response_model=Offer, status_code=status.HTTP_201_CREATED)
async def create_offer(
    request: CreateOfferRequest,
    _: Dict = Depends(require_offer_admin),
    service: OfferService = Depends(get_offer_service),
) -> Offer:
    """Create a new offer."""
    try:
        offer = await service.create_offer(request)
        offer_write_counter.labels(operation="create", status="success").inc()
        return offer
    except (InvalidTimeWindowException, InvalidOfferRulesException) as e:
        logger.warning(f"Rejected offer creation: {e}")
        offer_write_counter.labels(operation="create", status="invalid").inc()
        raise _client_error(e, status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.exception(f"Unexpected error creating offer: {e}")
        offer_write_counter.labels(operation="create", status="internal_error").inc()
        raise _internal_error()


@router.get("", response_model=OfferListResponse)
async def list_offers(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1),
    is_active: Optional[str] = Query(None),
    is_active_legacy: Optional[str] = Query(None, alias="isActive"),
    service: OfferService = Depends(get_offer_service),
) -> OfferListResponse:
    """Get a page of offers ordered by priority, newest first.

    ``limit`` above ``max_page_size`` is clamped. The active filter is
    applied only for ``true``/``false``; any other value means no filter.
    """
    limit = min(limit, settings.max_page_size)
    active_filter = _parse_flag(is_active)
    if active_filter is None:
        active_filter = _parse_flag(is_active_legacy)
    try:
        with offer_query_duration.labels(query="list").time():
            response = await service.list_offers(page, limit, active_filter)
        offer_read_counter.labels(query="list", status="success").inc()
        return response
    except Exception as e:
        logger.exception(f"Unexpected error listing offers: {e}")
        offer_read_counter.labels(query="list", status="error").inc()
        raise _internal_error()


@router.get("/active", response_model=List[Offer])
async def get_active_offers(
    service: OfferService = Depends(get_offer_service),
) -> List[Offer]:
    """Get all enabled offers valid right now, by priority."""
    try:
        with offer_query_duration.labels(query="active").time():
            offers = await service.get_active_offers()
        offer_read_counter.labels(query="active", status="success").inc()
        return offers
    except Exception as e:
        logger.exception(f"Unexpected error getting active offers: {e}")
        offer_read_counter.labels(query="active", status="error").inc()
        raise _internal_error()


@router.get("/product/{product_id}", response_model=List[Offer])
async def get_offers_for_product(
    product_id: str,
    service: OfferService = Depends(get_offer_service),
) -> List[Offer]:
    """Get active offers applicable to a catalog product."""
    try:
        with offer_query_duration.labels(query="product").time():
            offers = await service.get_offers_for_product(product_id)
        offer_read_counter.labels(query="product", status="success").inc()
        return offers
    except Exception as e:
        logger.exception(f"Unexpected error getting offers for product {product_id}: {e}")
        offer_read_counter.labels(query="product", status="error").inc()
        raise _internal_error()


@router.get("/product/{product_id}/best", response_model=BestOfferResponse)
async def get_best_offer_for_product(
    product_id: str,
    quantity: int = Query(..., ge=1),
    unit_price: Decimal = Query(..., ge=0),
    service: OfferService = Depends(get_offer_service),
) -> BestOfferResponse:
    """Get the applicable offer with the largest discount for a cart line."""
    try:
        response = await service.get_best_offer_for_product(product_id, quantity, unit_price)
        discount_quote_counter.labels(status="success").inc()
        return response
    except Exception as e:
        logger.exception(f"Unexpected error selecting best offer for {product_id}: {e}")
        discount_quote_counter.labels(status="error").inc()
        raise _internal_error()


@router.get("/{offer_id}", response_model=Offer)
async def get_offer(
    offer_id: UUID,
    service: OfferService = Depends(get_offer_service),
) -> Offer:
    """Get offer by ID."""
    try:
        offer = await service.get_offer(offer_id)
        offer_read_counter.labels(query="by_id", status="success").inc()
        return offer
    except OfferNotFoundException as e:
        logger.warning(f"Offer not found: {e}")
        offer_read_counter.labels(query="by_id", status="not_found").inc()
        raise _client_error(e, status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.exception(f"Unexpected error getting offer: {e}")
        offer_read_counter.labels(query="by_id", status="error").inc()
        raise _internal_error()


@router.post("/{offer_id}/quote", response_model=DiscountQuote)
async def quote_offer(
    offer_id: UUID,
    request: DiscountQuoteRequest,
    service: OfferService = Depends(get_offer_service),
) -> DiscountQuote:
    """Evaluate the discount an offer grants on a cart line."""
    try:
        quote = await service.quote_offer(offer_id, request.quantity, request.unit_price)
        discount_quote_counter.labels(status="success").inc()
        return quote
    except OfferNotFoundException as e:
        logger.warning(f"Offer not found for quote: {e}")
        discount_quote_counter.labels(status="not_found").inc()
        raise _client_error(e, status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.exception(f"Unexpected error quoting offer: {e}")
        discount_quote_counter.labels(status="error").inc()
        raise _internal_error()


@router.patch("/{offer_id}", response_model=Offer)
async def update_offer(
    offer_id: UUID,
    request: UpdateOfferRequest,
    _: Dict = Depends(require_offer_admin),
    service: OfferService = Depends(get_offer_service),
) -> Offer:
    """Partially update an offer."""
    try:
        offer = await service.update_offer(offer_id, request)
        offer_write_counter.labels(operation="update", status="success").inc()
        return offer
    except OfferNotFoundException as e:
        logger.warning(f"Offer not found for update: {e}")
        offer_write_counter.labels(operation="update", status="not_found").inc()
        raise _client_error(e, status.HTTP_404_NOT_FOUND)
    except (InvalidTimeWindowException, InvalidOfferRulesException) as e:
        logger.warning(f"Rejected offer update: {e}")
        offer_write_counter.labels(operation="update", status="invalid").inc()
        raise _client_error(e, status.HTTP_400_BAD_REQUEST)
    except Exception as e:
        logger.exception(f"Unexpected error updating offer: {e}")
        offer_write_counter.labels(operation="update", status="internal_error").inc()
        raise _internal_error()


@router.delete("/{offer_id}", response_model=DeleteOfferResponse, status_code=status.HTTP_200_OK)
async def delete_offer(
    offer_id: UUID,
    _: Dict = Depends(require_offer_admin),
    service: OfferService = Depends(get_offer_service),
) -> DeleteOfferResponse:
    """Delete an offer."""
    try:
        response = await service.delete_offer(offer_id)
        offer_write_counter.labels(operation="delete", status="success").inc()
        return response
    except OfferNotFoundException as e:
        logger.warning(f"Offer not found for delete: {e}")
        offer_write_counter.labels(operation="delete", status="not_found").inc()
        raise _client_error(e, status.HTTP_404_NOT_FOUND)
    except Exception as e:
        logger.exception(f"Unexpected error deleting offer: {e}")
        offer_write_counter.labels(operation="delete", status="internal_error").inc()
        raise _internal_error()
