"""PyJWT-backed bearer tokens.

Claims follow the storefront's login endpoint: ``userId``, ``email`` and
``role`` (``"admin"`` or ``"user"``).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from atelier.application.auth import Principal, TokenVerifier
from atelier.domain.exceptions import AuthorizationError


class JwtTokenVerifier(TokenVerifier):

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def verify(self, token: str) -> Principal:
        if not self._secret:
            raise AuthorizationError("Token verification is not configured")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthorizationError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthorizationError("Invalid token") from exc

        user_id = payload.get("userId")
        if not user_id:
            raise AuthorizationError("Invalid token payload")
        return Principal(
            user_id=str(user_id),
            email=payload.get("email", ""),
            role=payload.get("role", "user"),
        )

    def issue(self, principal: Principal, expires_in: timedelta = timedelta(days=7)) -> str:
        """Mint a token for *principal* (used by the CLI and tests)."""
        if not self._secret:
            raise AuthorizationError("Token signing is not configured")
        payload = {
            "userId": principal.user_id,
            "email": principal.email,
            "role": principal.role,
            "exp": datetime.now(timezone.utc) + expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)
