"""Domain exceptions for Promotional Offers Service."""


class DomainException(Exception):
    """Base domain exception."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class OfferNotFoundException(DomainException):
    """Offer not found exception."""

    def __init__(self, offer_id: str) -> None:
        super().__init__(
            message=f"Offer with id {offer_id} not found",
            code="OFFER_NOT_FOUND",
        )


class InvalidTimeWindowException(DomainException):
    """Offer end date is not after its start date."""

    def __init__(self, start_date: object, end_date: object) -> None:
        self.start_date = start_date
        self.end_date = end_date
        super().__init__(
            message=f"End date {end_date} must be after start date {start_date}",
            code="INVALID_TIME_WINDOW",
        )


class InvalidOfferRulesException(DomainException):
    """Offer rules do not fit the offer type."""

    def __init__(self, offer_type: str, details: str = "") -> None:
        message = f"Rules are not valid for offer type {offer_type}"
        if details:
            message = f"{message}: {details}"
        super().__init__(message=message, code="INVALID_OFFER_RULES")


class InvalidTokenException(DomainException):
    """Invalid token exception."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message=message, code="INVALID_TOKEN")


class TokenExpiredException(DomainException):
    """Token expired exception."""

    def __init__(self) -> None:
        super().__init__(
            message="Token has expired",
            code="TOKEN_EXPIRED",
        )


class InsufficientPermissionsException(DomainException):
    """Caller is authenticated but may not manage offers."""

    def __init__(self) -> None:
        super().__init__(
            message="Insufficient permissions to manage offers",
            code="FORBIDDEN",
        )
