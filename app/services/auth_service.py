"""
Access token handling

Tokens are issued by the accounts service; this backend only creates them
for internal tooling and verifies them on incoming requests.
"""

import logging
from jose import jwt
from datetime import datetime, timedelta
from typing import Optional, Dict, Any

from config import settings

logger = logging.getLogger(__name__)


class AuthService:
    """JWT access token service"""

    @staticmethod
    def create_access_token(data: Dict[Any, Any], expires_delta: Optional[timedelta] = None) -> str:
        """Create JWT access token"""
        to_encode = data.copy()
        expire = datetime.utcnow() + (expires_delta or timedelta(hours=settings.JWT_ACCESS_TOKEN_EXPIRE_HOURS))
        to_encode.update({"exp": expire, "type": "access"})

        return jwt.encode(
            to_encode,
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM
        )

    @staticmethod
    def verify_token(token: str, token_type: str = "access") -> Optional[Dict[Any, Any]]:
        """Verify and decode JWT token"""
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM]
            )

            # Verify token type
            if payload.get("type") != token_type:
                return None

            return payload

        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired access token")
            return None
        except jwt.JWTError:
            return None
