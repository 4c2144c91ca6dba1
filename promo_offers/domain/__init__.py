"""Domain layer."""
from promo_offers.domain.discounts import compute_discount, quote_discount
from promo_offers.domain.exceptions import (
    DomainException,
    InsufficientPermissionsException,
    InvalidOfferRulesException,
    InvalidTimeWindowException,
    InvalidTokenException,
    OfferNotFoundException,
    TokenExpiredException,
)
from promo_offers.domain.models import (
    BestOfferResponse,
    BundleDiscountRules,
    BuyXGetYRules,
    CreateOfferRequest,
    DeleteOfferResponse,
    DiscountQuote,
    DiscountQuoteRequest,
    FixedAmountOffRules,
    Offer,
    OfferListResponse,
    OfferType,
    Pagination,
    PercentageOffRules,
    UpdateOfferRequest,
)
from promo_offers.domain.ordering import ORDER_BY, sort_offers
from promo_offers.domain.validation import merge_offer, validate_offer, validate_time_window

__all__ = [
    # Models
    "Offer",
    "OfferType",
    "BuyXGetYRules",
    "BundleDiscountRules",
    "PercentageOffRules",
    "FixedAmountOffRules",
    "CreateOfferRequest",
    "UpdateOfferRequest",
    "Pagination",
    "OfferListResponse",
    "DeleteOfferResponse",
    "DiscountQuoteRequest",
    "DiscountQuote",
    "BestOfferResponse",
    # Behaviour
    "compute_discount",
    "quote_discount",
    "merge_offer",
    "validate_offer",
    "validate_time_window",
    "ORDER_BY",
    "sort_offers",
    # Exceptions
    "DomainException",
    "OfferNotFoundException",
    "InvalidTimeWindowException",
    "InvalidOfferRulesException",
    "InvalidTokenException",
    "TokenExpiredException",
    "InsufficientPermissionsException",
]
