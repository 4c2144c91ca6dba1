"""JWT handler for validating access tokens issued by the user service."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import jwt

from promo_offers.config import settings
from promo_offers.domain.exceptions import InvalidTokenException, TokenExpiredException

logger = logging.getLogger(__name__)


class JWTHandler:
    """JWT handler for creating and validating tokens."""

    def __init__(self, secret: str = settings.jwt_secret, algorithm: str = settings.jwt_algorithm):
        self.secret = secret
        self.algorithm = algorithm

    def create_access_token(
        self,
        subject: str,
        roles: Optional[List[str]] = None,
        expires_in_minutes: int = 15,
    ) -> str:
        """Create access token (used by tests and local tooling)."""
        if roles is None:
            roles = ["user"]

        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "roles": roles,
            "iat": now,
            "exp": now + timedelta(minutes=expires_in_minutes),
            "type": "access",
        }

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def validate_token(self, token: str) -> Dict:
        """Validate and decode token."""
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            raise TokenExpiredException()
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            raise InvalidTokenException(f"Invalid token: {e}")

    def validate_access_token(self, token: str) -> Dict:
        """Validate access token specifically."""
        payload = self.validate_token(token)
        if payload.get("type") != "access":
            raise InvalidTokenException("Token is not an access token")
        return payload
