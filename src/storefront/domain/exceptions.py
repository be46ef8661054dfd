"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the adapters (CLI, HTTP) can catch them uniformly and turn them into
structured, user-facing errors.  Each subclass carries the data a caller
needs to act on the failure, not just a message.
"""

from __future__ import annotations

from typing import Any


class DomainException(Exception):
    """Base class for all domain errors."""

    code = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        """Machine-readable context for the error (empty by default)."""
        return {}


class ValidationError(DomainException):
    """A business rule or invariant was violated by caller input."""

    code = "validation_error"

    def __init__(self, message: str, fields: tuple[str, ...] | list[str] = ()) -> None:
        super().__init__(message)
        self.fields = tuple(fields)

    def details(self) -> dict[str, Any]:
        return {"fields": list(self.fields)} if self.fields else {}


class EmptyCartError(DomainException):
    """Checkout was attempted with no cart lines."""

    code = "empty_cart"

    def __init__(self, message: str = "Cart is empty; add at least one item before checkout") -> None:
        super().__init__(message)


class OutOfStockError(DomainException):
    """Not enough stock to satisfy a requested quantity."""

    code = "out_of_stock"

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        super().__init__(
            f"Product '{product_id}' is out of stock "
            f"(requested {requested}, {available} available)"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available

    def details(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "requested": self.requested,
            "available": self.available,
        }


class InvalidTransitionError(DomainException):
    """The requested status change is not in the transition table."""

    code = "invalid_transition"

    def __init__(self, current: Any, requested: Any) -> None:
        current_value = getattr(current, "value", current)
        requested_value = getattr(requested, "value", requested)
        super().__init__(
            f"Cannot change order status from '{current_value}' to '{requested_value}'"
        )
        self.current = current
        self.requested = requested

    def details(self) -> dict[str, Any]:
        return {
            "current": getattr(self.current, "value", self.current),
            "requested": getattr(self.requested, "value", self.requested),
        }


class NotFoundError(DomainException):
    """A requested entity does not exist."""

    code = "not_found"

    def __init__(self, entity: str, key: Any) -> None:
        super().__init__(f"{entity} '{key}' not found")
        self.entity = entity
        self.key = key

    def details(self) -> dict[str, Any]:
        return {"entity": self.entity, "key": str(self.key)}


class UnauthenticatedError(DomainException):
    """The caller did not identify itself, or presented a bad credential."""

    code = "unauthenticated"


class UnauthorizedError(DomainException):
    """The acting user may not perform this operation."""

    code = "unauthorized"


class PaymentGatewayError(DomainException):
    """The external payment collaborator failed.  Never retried here."""

    code = "payment_gateway_error"
