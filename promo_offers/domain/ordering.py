"""Ordering policy shared by every offer query.

Higher priority first, then the most recently created.
"""
from typing import Iterable, List, Tuple

from promo_offers.domain.models import Offer

# (field, descending)
ORDER_BY: Tuple[Tuple[str, bool], ...] = (
    ("priority", True),
    ("created_at", True),
)


def sort_offers(offers: Iterable[Offer]) -> List[Offer]:
    """Sort offers in memory according to ``ORDER_BY``."""
    result = list(offers)
    # Stable sorts applied from the least significant key.
    for field, descending in reversed(ORDER_BY):
        result.sort(key=lambda offer: getattr(offer, field), reverse=descending)
    return result
