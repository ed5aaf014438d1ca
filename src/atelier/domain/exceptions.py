"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly.  Each subclass carries a
``kind`` string which is what callers see in structured error responses.
"""

from __future__ import annotations

from decimal import Decimal


class DomainException(Exception):
    """Base class for all domain errors."""

    kind = "domain_error"

    def details(self) -> dict:
        """Extra machine-readable fields for error responses."""
        return {}


class ValidationError(DomainException):
    """A request field is missing/malformed or an invariant was violated."""

    kind = "validation"


class AuthorizationError(DomainException):
    """The caller presented no credentials or invalid credentials."""

    kind = "authorization"


class ForbiddenError(AuthorizationError):
    """The caller is authenticated but lacks the required role."""

    kind = "forbidden"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = "not_found"


class ConflictError(DomainException):
    """The request is well-formed but conflicts with current state."""

    kind = "conflict"


class InsufficientStockError(ConflictError):

    kind = "insufficient_stock"

    def __init__(
        self,
        product_id: str,
        product_name: str,
        size: str,
        available: int,
        requested: int,
    ) -> None:
        super().__init__(
            f"Insufficient stock for {product_name} ({product_id}) - Size {size}. "
            f"Available: {available}, Requested: {requested}"
        )
        self.product_id = product_id
        self.product_name = product_name
        self.size = size
        self.available = available
        self.requested = requested

    def details(self) -> dict:
        return {
            "productId": self.product_id,
            "size": self.size,
            "available": self.available,
            "requested": self.requested,
        }


class DiscountRejectedError(ConflictError):
    """A discount code exists but cannot be applied.

    ``reason`` is one of ``invalid``, ``expired``, ``usage_exhausted``,
    ``min_order_amount`` or ``unsupported_type``.
    """

    kind = "discount_rejected"

    def __init__(
        self,
        message: str,
        reason: str,
        min_order_amount: Decimal | None = None,
        shortfall: Decimal | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.min_order_amount = min_order_amount
        self.shortfall = shortfall

    def details(self) -> dict:
        result: dict = {"reason": self.reason}
        if self.min_order_amount is not None:
            result["minOrderAmount"] = str(self.min_order_amount)
        if self.shortfall is not None:
            result["minOrderRemaining"] = str(self.shortfall)
        return result


class TrustBoundaryError(ConflictError):
    """Client-supplied money amounts disagree with the server's figures."""

    kind = "trust_boundary"


class InfrastructureError(DomainException):
    """Storage or transport is unavailable.  Safe to retry."""

    kind = "infrastructure"


class EmailConfigurationError(InfrastructureError):
    """Server-side email credentials are missing."""

    kind = "email_configuration"


class EmailDeliveryError(InfrastructureError):
    """The mail transport rejected or failed to deliver a message."""

    kind = "email_delivery"
