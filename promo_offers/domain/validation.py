"""Offer validation and partial-update merge."""
from datetime import datetime
from typing import Any, Dict

from pydantic import ValidationError

from promo_offers.domain.exceptions import InvalidOfferRulesException, InvalidTimeWindowException
from promo_offers.domain.models import Offer, OfferFields, UpdateOfferRequest, parse_rules, utcnow

# Fields that may be cleared by sending an explicit null.
NULLABLE_FIELDS = frozenset({"description"})


def validate_time_window(start_date: datetime, end_date: datetime) -> None:
    """Raise InvalidTimeWindowException unless end_date is after start_date."""
    if end_date <= start_date:
        raise InvalidTimeWindowException(start_date, end_date)


def validate_offer(offer: OfferFields) -> None:
    """Validate an offer (or creation payload) before persistence."""
    validate_time_window(offer.start_date, offer.end_date)


def merge_offer(existing: Offer, changes: UpdateOfferRequest) -> Offer:
    """Apply supplied fields over a stored offer and return a new validated offer.

    ``existing`` is left untouched. Rules are re-parsed against the merged
    offer type, so switching type without matching rules is rejected.
    """
    updates: Dict[str, Any] = {
        field: value
        for field, value in changes.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }

    merged = existing.model_dump()
    merged.update(updates)
    merged["updated_at"] = utcnow()

    offer_type = merged["offer_type"]
    try:
        merged["rules"] = parse_rules(offer_type, merged["rules"])
    except ValidationError as e:
        raise InvalidOfferRulesException(
            str(getattr(offer_type, "value", offer_type)),
            details="; ".join(error["msg"] for error in e.errors()),
        )

    offer = Offer.model_validate(merged)
    validate_offer(offer)
    return offer
