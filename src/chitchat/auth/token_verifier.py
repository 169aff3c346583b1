"""
Bearer token verification.

Tokens are HS256 JWTs issued by the account service with the user id in the
``id`` claim. Verification never raises: any problem with the token yields
None and the caller decides whether that means 401 or an anonymous socket.
"""

from datetime import timedelta
from typing import Optional

import jwt
from loguru import logger

from chitchat.utils.clock import utc_now
from chitchat.utils.settings.core import AuthSettings

USER_ID_CLAIMS = ("id", "sub")


class TokenVerifier:
    """Validates bearer tokens and extracts the user id they carry."""

    def __init__(self, secret: str, algorithm: str = "HS256", token_ttl: timedelta = timedelta(days=7)):
        self.secret = secret
        self.algorithm = algorithm
        self.token_ttl = token_ttl

    @classmethod
    def from_settings(cls, settings: AuthSettings) -> "TokenVerifier":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            token_ttl=timedelta(days=settings.token_ttl_days),
        )

    def verify(self, token: Optional[str]) -> Optional[str]:
        """
        Return the user id embedded in a valid token, or None.

        Missing, malformed, expired or wrongly signed tokens all give None.
        """
        if not token:
            return None

        try:
            claims = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("Rejected expired token")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected invalid token: {e}")
            return None

        for claim in USER_ID_CLAIMS:
            value = claims.get(claim)
            if value is not None and str(value).strip():
                return str(value)

        logger.warning("Rejected token without a user id claim")
        return None

    @staticmethod
    def token_from_header(header: Optional[str]) -> Optional[str]:
        if not header:
            return None
        parts = header.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            return None
        return parts[1]

    def issue(self, user_id: str, expires_in: Optional[timedelta] = None) -> str:
        """
        Mint a token for ``user_id``.

        Development helper only; production tokens come from the account service.
        """
        expires_at = utc_now() + (expires_in if expires_in is not None else self.token_ttl)
        return jwt.encode({"id": user_id, "exp": expires_at}, self.secret, algorithm=self.algorithm)
