"""Caller identity as seen by the use cases.

The HTTP layer only extracts the raw bearer token; turning it into a
Principal is the job of a TokenVerifier supplied by the composition root.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from atelier.domain.exceptions import AuthorizationError, ForbiddenError

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: str = ""
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


class TokenVerifier(ABC):

    @abstractmethod
    def verify(self, token: str) -> Principal:
        """Decode *token*; raise AuthorizationError if it is not valid."""


def require_principal(principal: Principal | None) -> Principal:
    if principal is None:
        raise AuthorizationError("Authorization required")
    return principal


def require_admin(principal: Principal | None) -> Principal:
    principal = require_principal(principal)
    if not principal.is_admin:
        raise ForbiddenError("Admin access required")
    return principal
