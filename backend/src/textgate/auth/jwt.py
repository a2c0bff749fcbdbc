"""JWT verification with a shared HS256 secret.

Tokens are issued by the external auth service; this service only verifies
them and reads the ``sub`` claim as the user id.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from textgate.config import settings


class JWTAuth:
    """JWT handler bound to the configured secret and algorithm."""

    def __init__(self, secret_key: Optional[str] = None, algorithm: Optional[str] = None):
        """Initialize with the verification secret, defaulting to settings."""
        self.secret_key = secret_key or settings.jwt_secret_key
        self.algorithm = algorithm or settings.jwt_algorithm
        self.access_token_expire_minutes = 60

    def create_access_token(self, user_id: str, additional_claims: Optional[Dict[str, Any]] = None) -> str:
        """
        Create a signed access token.

        Used by local tooling and tests; production tokens come from the auth service.

        Args:
            user_id: Subject of the token
            additional_claims: Extra claims merged into the payload

        Returns:
            Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "sub": user_id,
            "iat": now,
            "exp": now + timedelta(minutes=self.access_token_expire_minutes),
            "type": "access",
        }
        if additional_claims:
            claims.update(additional_claims)
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify_access_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode an access token.

        Args:
            token: Encoded JWT

        Returns:
            Decoded claims

        Raises:
            jwt.ExpiredSignatureError: If the token has expired
            jwt.InvalidTokenError: If the token is invalid, not an access token or has no subject
        """
        payload = jwt.decode(
            token,
            self.secret_key,
            algorithms=[self.algorithm],
            options={"require": ["sub", "exp"]},
        )

        if payload.get("type", "access") != "access":
            raise jwt.InvalidTokenError("Invalid token type")

        return payload


# Global JWT auth instance
jwt_auth = JWTAuth()
