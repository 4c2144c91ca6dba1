"""SQLAlchemy ORM models for database tables."""
import uuid

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID as PostgreSQL_UUID
from sqlalchemy.types import CHAR, TypeDecorator

from promo_offers.domain.models import OfferType, utcnow
from promo_offers.infrastructure.database import Base


class GUID(TypeDecorator):
    """Platform-independent GUID type.

    Uses PostgreSQL UUID, otherwise CHAR(32), storing as stringified hex.
    """
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PostgreSQL_UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(32))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if dialect.name == "postgresql":
            return str(value)
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(value)
        return "%.32x" % value.int

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class OfferModel(Base):
    """SQLAlchemy model for offers table."""

    __tablename__ = "offers"

    offer_id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    offer_type = Column(Enum(OfferType, name="offer_type"), nullable=False, index=True)
    rules = Column(JSON, nullable=False)
    product_ids = Column(JSON, nullable=False, default=list)
    category_ids = Column(JSON, nullable=False, default=list)
    subcategory_ids = Column(JSON, nullable=False, default=list)
    gender_ids = Column(JSON, nullable=False, default=list)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    priority = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    # Composite indexes for common queries
    __table_args__ = (
        Index("idx_offers_active_window", "is_active", "start_date", "end_date"),
        Index("idx_offers_priority_created", "priority", "created_at"),
        CheckConstraint("end_date > start_date", name="ck_offers_time_window"),
        CheckConstraint("priority >= 1", name="ck_offers_priority_positive"),
    )
