"""Discount calculation for offers.

Every strategy returns ``None`` when the offer does not apply to the line
(minimum quantity not reached, rule fields missing) and a non-negative
``Decimal`` otherwise. ``compute_discount`` folds ``None`` into zero.
"""
from decimal import Decimal
from typing import Callable, Dict, Optional, Union

from promo_offers.domain.models import DiscountQuote, Offer, OfferRules, OfferType

Number = Union[int, float, Decimal]
Strategy = Callable[[OfferRules, int, Decimal], Optional[Decimal]]

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _below_minimum(rules: OfferRules, quantity: int) -> bool:
    min_quantity = getattr(rules, "min_quantity", None)
    return min_quantity is not None and quantity < min_quantity


def buy_x_get_y_discount(rules: OfferRules, quantity: int, unit_price: Decimal) -> Optional[Decimal]:
    """Every full set of buy + get items grants ``get_quantity`` free items."""
    buy_quantity = getattr(rules, "buy_quantity", None)
    get_quantity = getattr(rules, "get_quantity", None)
    if buy_quantity is None or get_quantity is None:
        return None

    set_size = buy_quantity + get_quantity
    if set_size <= 0:
        return None
    sets = quantity // set_size
    return sets * get_quantity * unit_price


def bundle_discount(rules: OfferRules, quantity: int, unit_price: Decimal) -> Optional[Decimal]:
    """Line total above the bundle price, once the bundle size is reached."""
    bundle_price = getattr(rules, "bundle_price", None)
    min_quantity = getattr(rules, "min_quantity", None)
    if bundle_price is None or min_quantity is None or quantity < min_quantity:
        return None

    return max(ZERO, quantity * unit_price - _to_decimal(bundle_price))


def percentage_off_discount(rules: OfferRules, quantity: int, unit_price: Decimal) -> Optional[Decimal]:
    discount_percentage = getattr(rules, "discount_percentage", None)
    if discount_percentage is None or _below_minimum(rules, quantity):
        return None

    return quantity * unit_price * _to_decimal(discount_percentage) / HUNDRED


def fixed_amount_off_discount(rules: OfferRules, quantity: int, unit_price: Decimal) -> Optional[Decimal]:
    """Fixed amount, capped at the line total."""
    discount_amount = getattr(rules, "discount_amount", None)
    if discount_amount is None or _below_minimum(rules, quantity):
        return None

    return min(_to_decimal(discount_amount), quantity * unit_price)


STRATEGIES: Dict[OfferType, Strategy] = {
    OfferType.BUY_X_GET_Y: buy_x_get_y_discount,
    OfferType.BUNDLE_DISCOUNT: bundle_discount,
    OfferType.PERCENTAGE_OFF: percentage_off_discount,
    OfferType.FIXED_AMOUNT_OFF: fixed_amount_off_discount,
}


def _evaluate(offer: Offer, quantity: int, unit_price: Decimal) -> Optional[Decimal]:
    if quantity < 1 or unit_price < ZERO:
        return None

    strategy = STRATEGIES.get(offer.offer_type)
    if strategy is None:
        return None

    discount = strategy(offer.rules, quantity, unit_price)
    if discount is None:
        return None
    return max(ZERO, discount)


def compute_discount(offer: Offer, quantity: int, unit_price: Number) -> Decimal:
    """Discount ``offer`` grants on ``quantity`` items at ``unit_price`` each.

    Pure: no I/O, no mutation. Never negative and never raises for a rules
    record; an offer that does not apply yields zero.
    """
    discount = _evaluate(offer, quantity, _to_decimal(unit_price))
    if discount is None:
        return ZERO
    return discount


def quote_discount(offer: Offer, quantity: int, unit_price: Number) -> DiscountQuote:
    """Like ``compute_discount`` but reports whether the offer applied at all."""
    price = _to_decimal(unit_price)
    discount = _evaluate(offer, quantity, price)
    line_total = quantity * price

    return DiscountQuote(
        offer_id=offer.offer_id,
        offer_type=offer.offer_type,
        quantity=quantity,
        unit_price=price,
        line_total=line_total,
        discount=discount if discount is not None else ZERO,
        final_total=line_total - (discount or ZERO),
        applicable=discount is not None,
    )
