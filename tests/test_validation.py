"""Tests for offer validation, rule parsing, merging and ordering."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

import pytest
from pydantic import ValidationError

from promo_offers.domain.exceptions import InvalidOfferRulesException, InvalidTimeWindowException
from promo_offers.domain.models import (
    BundleDiscountRules,
    CreateOfferRequest,
    Offer,
    OfferType,
    PercentageOffRules,
    UpdateOfferRequest,
)
from promo_offers.domain.ordering import sort_offers
from promo_offers.domain.validation import merge_offer, validate_offer, validate_time_window

START = datetime(2026, 5, 1, 0, 0, 0)


def test_time_window_equal_dates_rejected() -> None:
    with pytest.raises(InvalidTimeWindowException) as exc_info:
        validate_time_window(START, START)

    assert exc_info.value.code == "INVALID_TIME_WINDOW"


def test_time_window_end_before_start_rejected() -> None:
    with pytest.raises(InvalidTimeWindowException):
        validate_time_window(START, START - timedelta(days=1))


def test_time_window_one_tick_after_start_accepted() -> None:
    validate_time_window(START, START + timedelta(microseconds=1))


def test_validate_offer_checks_request(make_request: Callable[..., CreateOfferRequest]) -> None:
    request = make_request(start_date=START, end_date=START)

    with pytest.raises(InvalidTimeWindowException):
        validate_offer(request)


def test_rules_parsed_by_offer_type(make_request: Callable[..., CreateOfferRequest]) -> None:
    request = make_request(
        offer_type=OfferType.BUNDLE_DISCOUNT,
        rules={"bundle_price": "49.90", "min_quantity": 3},
    )

    assert isinstance(request.rules, BundleDiscountRules)
    assert request.rules.bundle_price == Decimal("49.90")


def test_irrelevant_rule_fields_are_ignored(make_request: Callable[..., CreateOfferRequest]) -> None:
    request = make_request(rules={"discount_percentage": 20, "bundle_price": 99})

    assert isinstance(request.rules, PercentageOffRules)
    assert not hasattr(request.rules, "bundle_price")


def test_missing_rule_fields_rejected(make_request: Callable[..., CreateOfferRequest]) -> None:
    with pytest.raises(ValidationError):
        make_request(offer_type=OfferType.BUY_X_GET_Y, rules={"buy_quantity": 2})


def test_percentage_above_hundred_rejected(make_request: Callable[..., CreateOfferRequest]) -> None:
    with pytest.raises(ValidationError):
        make_request(rules={"discount_percentage": 150})


def test_priority_defaults_to_baseline(make_request: Callable[..., CreateOfferRequest]) -> None:
    request = make_request()

    assert request.priority == 1
    assert request.is_active is True
    assert request.product_ids == []


def test_aware_dates_stored_as_naive_utc(make_request: Callable[..., CreateOfferRequest]) -> None:
    plus_three = timezone(timedelta(hours=3))
    request = make_request(
        start_date=datetime(2026, 5, 1, 3, 0, tzinfo=plus_three),
        end_date=datetime(2026, 5, 2, 3, 0, tzinfo=plus_three),
    )

    assert request.start_date == datetime(2026, 5, 1, 0, 0)
    assert request.start_date.tzinfo is None


def test_merge_changes_only_supplied_fields(sample_offer: Offer) -> None:
    merged = merge_offer(sample_offer, UpdateOfferRequest(name="Summer sale", priority=5))

    assert merged.name == "Summer sale"
    assert merged.priority == 5
    assert merged.description == sample_offer.description
    assert merged.rules == sample_offer.rules
    assert merged.offer_id == sample_offer.offer_id
    assert merged.created_at == sample_offer.created_at


def test_merge_does_not_mutate_existing(sample_offer: Offer) -> None:
    original_name = sample_offer.name

    merge_offer(sample_offer, UpdateOfferRequest(name="Renamed"))

    assert sample_offer.name == original_name


def test_merge_rejects_invalid_window(sample_offer: Offer) -> None:
    changes = UpdateOfferRequest(end_date=sample_offer.start_date)

    with pytest.raises(InvalidTimeWindowException):
        merge_offer(sample_offer, changes)


def test_merge_unrelated_field_on_invalid_window_still_fails(sample_offer: Offer) -> None:
    broken = sample_offer.model_copy(update={"end_date": sample_offer.start_date})

    with pytest.raises(InvalidTimeWindowException):
        merge_offer(broken, UpdateOfferRequest(description="only the text changes"))


def test_merge_type_switch_requires_matching_rules(sample_offer: Offer) -> None:
    with pytest.raises(InvalidOfferRulesException) as exc_info:
        merge_offer(sample_offer, UpdateOfferRequest(offer_type=OfferType.BUY_X_GET_Y))

    assert exc_info.value.code == "INVALID_OFFER_RULES"


def test_merge_type_switch_with_rules(sample_offer: Offer) -> None:
    merged = merge_offer(
        sample_offer,
        UpdateOfferRequest(
            offer_type=OfferType.FIXED_AMOUNT_OFF,
            rules={"discount_amount": 5},
        ),
    )

    assert merged.offer_type == OfferType.FIXED_AMOUNT_OFF
    assert merged.rules.discount_amount == Decimal("5")


def test_merge_null_does_not_clear_required_fields(sample_offer: Offer) -> None:
    merged = merge_offer(sample_offer, UpdateOfferRequest(name=None, description=None))

    assert merged.name == sample_offer.name
    assert merged.description is None


def test_sort_offers_priority_then_newest(make_offer: Callable[..., Offer]) -> None:
    low = make_offer(name="low", priority=1, created_at=START)
    high_old = make_offer(name="high-old", priority=5, created_at=START)
    high_new = make_offer(name="high-new", priority=5, created_at=START + timedelta(hours=1))

    ordered = sort_offers([low, high_old, high_new])

    assert [offer.name for offer in ordered] == ["high-new", "high-old", "low"]
