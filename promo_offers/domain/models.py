"""Domain models for Promotional Offers Service."""
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator


def utcnow() -> datetime:
    """Current time as naive UTC, the representation offers are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class OfferType(str, Enum):
    """Offer type enum."""

    BUY_X_GET_Y = "buy_x_get_y"
    BUNDLE_DISCOUNT = "bundle_discount"
    PERCENTAGE_OFF = "percentage_off"
    FIXED_AMOUNT_OFF = "fixed_amount_off"


class OfferRulesBase(BaseModel):
    """Common config for rule records.

    Fields belonging to other offer types are dropped on parse.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)


class BuyXGetYRules(OfferRulesBase):
    """Buy ``buy_quantity`` items, get ``get_quantity`` more for free."""

    buy_quantity: int = Field(ge=1)
    get_quantity: int = Field(ge=0)


class BundleDiscountRules(OfferRulesBase):
    """Fixed bundle price once ``min_quantity`` items are bought."""

    bundle_price: Decimal = Field(ge=0)
    min_quantity: int = Field(ge=1)


class PercentageOffRules(OfferRulesBase):
    """Percentage off the line total."""

    discount_percentage: Decimal = Field(ge=0, le=100)
    min_quantity: Optional[int] = Field(default=None, ge=1)


class FixedAmountOffRules(OfferRulesBase):
    """Fixed amount off the line total, capped at the line total."""

    discount_amount: Decimal = Field(ge=0)
    min_quantity: Optional[int] = Field(default=None, ge=1)


OfferRules = Union[BuyXGetYRules, BundleDiscountRules, PercentageOffRules, FixedAmountOffRules]

RULES_BY_TYPE: Dict[OfferType, Type[OfferRulesBase]] = {
    OfferType.BUY_X_GET_Y: BuyXGetYRules,
    OfferType.BUNDLE_DISCOUNT: BundleDiscountRules,
    OfferType.PERCENTAGE_OFF: PercentageOffRules,
    OfferType.FIXED_AMOUNT_OFF: FixedAmountOffRules,
}


def parse_rules(offer_type: Union[OfferType, str], rules: Any) -> OfferRules:
    """Parse a rules record with the class matching ``offer_type``.

    Raises pydantic ``ValidationError`` when a required field is missing
    or out of range.
    """
    rules_class = RULES_BY_TYPE[OfferType(offer_type)]
    if isinstance(rules, BaseModel):
        rules = rules.model_dump(exclude_none=True)
    return rules_class.model_validate(rules)


class OfferFields(BaseModel):
    """Fields shared by stored offers and creation payloads."""

    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    offer_type: OfferType
    rules: OfferRules
    product_ids: List[str] = Field(default_factory=list)
    category_ids: List[str] = Field(default_factory=list)
    subcategory_ids: List[str] = Field(default_factory=list)
    gender_ids: List[str] = Field(default_factory=list)
    start_date: datetime
    end_date: datetime
    is_active: bool = True
    priority: int = Field(default=1, ge=1)

    @field_validator("rules", mode="before")
    @classmethod
    def _parse_rules_for_type(cls, value: Any, info: ValidationInfo) -> OfferRules:
        offer_type = info.data.get("offer_type")
        if offer_type is None:
            raise ValueError("offer_type must be valid to parse rules")
        try:
            return parse_rules(offer_type, value)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
            raise ValueError(f"invalid rules for {OfferType(offer_type).value}: {details}")

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_dates(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class Offer(OfferFields):
    """Offer domain model."""

    model_config = ConfigDict(from_attributes=True)

    offer_id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def is_active_at(self, moment: datetime) -> bool:
        """Enabled and inside the inclusive validity window."""
        return self.is_active and self.start_date <= moment <= self.end_date

    def applies_to_product(self, product_id: str) -> bool:
        """Unscoped on the product dimension, or scoped to ``product_id``."""
        return not self.product_ids or product_id in self.product_ids


class CreateOfferRequest(OfferFields):
    """Request to create an offer."""


class UpdateOfferRequest(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    offer_type: Optional[OfferType] = None
    rules: Optional[Dict[str, Any]] = None
    product_ids: Optional[List[str]] = None
    category_ids: Optional[List[str]] = None
    subcategory_ids: Optional[List[str]] = None
    gender_ids: Optional[List[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = Field(default=None, ge=1)

    @field_validator("start_date", "end_date")
    @classmethod
    def _normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return value
        return to_naive_utc(value)


class Pagination(BaseModel):
    """Pagination metadata."""

    total: int
    page: int
    limit: int
    total_pages: int


class OfferListResponse(BaseModel):
    """A page of offers."""

    data: List[Offer]
    pagination: Pagination


class DeleteOfferResponse(BaseModel):
    """Response after deleting an offer."""

    offer_id: UUID
    message: str


class DiscountQuoteRequest(BaseModel):
    """Quantity and unit price to evaluate an offer against."""

    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)


class DiscountQuote(BaseModel):
    """Discount evaluation for one offer and one cart line.

    ``applicable`` is False when the offer does not apply to the line at
    all (minimum quantity not reached, unknown offer type), as opposed to
    an offer that applies and yields a zero discount.
    """

    offer_id: UUID
    offer_type: OfferType
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    discount: Decimal
    final_total: Decimal
    applicable: bool


class BestOfferResponse(BaseModel):
    """Best offer for a product line."""

    product_id: str
    offer: Optional[Offer] = None
    discount: Decimal = Decimal("0")
