"""API dependencies with dependency injection."""
import logging
from typing import AsyncGenerator, Dict, Optional

from fastapi import Depends, Header, HTTPException, status

from promo_offers.config import settings
from promo_offers.domain.exceptions import (
    DomainException,
    InsufficientPermissionsException,
    InvalidTokenException,
)
from promo_offers.infrastructure.database import get_async_session
from promo_offers.infrastructure.jwt_handler import JWTHandler
from promo_offers.infrastructure.repositories import OfferRepository
from promo_offers.infrastructure.repositories_postgres import PostgresOfferRepository
from promo_offers.services.offer_service import OfferService

logger = logging.getLogger(__name__)

_jwt_handler: Optional[JWTHandler] = None


def get_jwt_handler() -> JWTHandler:
    """Get JWTHandler singleton."""
    global _jwt_handler
    if _jwt_handler is None:
        _jwt_handler = JWTHandler()
    return _jwt_handler


async def get_offer_repository() -> AsyncGenerator[OfferRepository, None]:
    """Get PostgreSQL OfferRepository bound to a request-scoped session."""
    async for db_session in get_async_session():
        yield PostgresOfferRepository(db_session)


async def get_offer_service(
    repository: OfferRepository = Depends(get_offer_repository),
) -> OfferService:
    """Get OfferService with dependencies."""
    return OfferService(offer_repository=repository)


def require_offer_admin(
    authorization: Optional[str] = Header(None),
    jwt_handler: JWTHandler = Depends(get_jwt_handler),
) -> Dict:
    """Allow the request only for a bearer token carrying an offer admin role."""
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "UNAUTHORIZED", "message": "Missing Authorization header"},
        )

    scheme, _, token = authorization.partition(" ")
    try:
        if scheme.lower() != "bearer" or not token:
            raise InvalidTokenException("Authorization header must be 'Bearer <token>'")

        payload = jwt_handler.validate_access_token(token)
        roles = payload.get("roles", [])
        if not set(roles) & set(settings.offer_admin_roles):
            raise InsufficientPermissionsException()
    except InsufficientPermissionsException as e:
        logger.warning(f"Rejected offer write for subject {payload.get('sub')}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": e.code, "message": e.message},
        )
    except DomainException as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": e.code, "message": e.message},
        )

    return payload
