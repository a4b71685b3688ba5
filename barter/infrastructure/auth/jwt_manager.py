"""JWT Token Management.

The engine does not own user accounts; it trusts the ``user_id`` claim of
an access token signed with the shared secret.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import structlog
from jose import JWTError, jwt

from barter.config import get_settings

logger = structlog.get_logger()


class JWTManager:
    """Handles JWT token creation and verification."""

    def __init__(
        self,
        secret_key: str | None = None,
        algorithm: str | None = None,
        expire_minutes: int | None = None,
    ):
        """
        Initialize JWT manager.

        Args:
            secret_key: Secret key for signing tokens. Defaults to settings.
            algorithm: Signing algorithm. Defaults to settings.
            expire_minutes: Access token lifetime. Defaults to settings.
        """
        settings = get_settings()
        self.secret_key = secret_key or settings.secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.expire_minutes = expire_minutes or settings.jwt_access_token_expire_minutes

    def create_access_token(
        self,
        user_id: int,
        expires_delta: timedelta | None = None,
        **claims: Any,
    ) -> str:
        """
        Create a JWT access token for a user.

        Args:
            user_id: Internal user ID (``user_id`` claim)
            expires_delta: Optional custom expiration time
            **claims: Extra claims to embed

        Returns:
            Encoded JWT token
        """
        expire = datetime.now(timezone.utc) + (
            expires_delta
            if expires_delta
            else timedelta(minutes=self.expire_minutes)
        )
        to_encode = {**claims, "user_id": user_id, "exp": expire, "type": "access"}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> dict[str, Any] | None:
        """
        Verify and decode a JWT token.

        Returns:
            Decoded token data or None if invalid or expired
        """
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.info("jwt.invalid_token", error=str(e))
            return None

    def verify_access_token(self, token: str) -> dict[str, Any] | None:
        """
        Verify an access token specifically.

        Returns:
            Decoded token data or None if invalid/wrong type
        """
        payload = self.verify_token(token)
        if payload and payload.get("type") == "access":
            return payload
        return None

    def user_id_from_token(self, token: str) -> int | None:
        """Positive integer ``user_id`` of a valid access token, else None."""
        payload = self.verify_access_token(token)
        if not payload:
            return None

        try:
            user_id = int(payload.get("user_id"))
        except (TypeError, ValueError):
            return None
        return user_id if user_id > 0 else None


# Singleton instance
_jwt_manager: JWTManager | None = None


def get_jwt_manager() -> JWTManager:
    """Get or create the JWT manager singleton."""
    global _jwt_manager
    if _jwt_manager is None:
        _jwt_manager = JWTManager()
    return _jwt_manager
