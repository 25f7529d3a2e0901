"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Account
  3xxx: Product
  4xxx: Negotiation
  9xxx: System

Taxonomy → HTTP status:
  NotFound 404 | Forbidden 403 | ValidationFailed 400 | InvalidState 400 | ServerError 500
"""

from typing import Any


class AppError(Exception):
    """Base application error.

    ``data`` is an optional machine-readable payload placed in the response
    envelope (e.g. the computed offer floor so the client can retry).
    """

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        data: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.data = data
        super().__init__(message)


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1006, "Admin role required", 403)


# --- 2xxx: Account ---

class BuyerProfileNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2002, f"Buyer profile not found for user {user_id}", 404)


class InsufficientOrderHistoryError(AppError):
    def __init__(self, required: int, delivered: int) -> None:
        super().__init__(
            2003,
            f"Negotiation not allowed. Requires at least {required} delivered orders "
            f"(found {delivered})",
            403,
        )


class PaymentNotVerifiedError(AppError):
    def __init__(self) -> None:
        super().__init__(2004, "Please verify your payment method to negotiate prices", 403)


# --- 3xxx: Product ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(3001, f"Product not found: {product_id}", 404)


class ProductNotNegotiableError(AppError):
    def __init__(self, product_id: str) -> None:
        super().__init__(
            3002,
            f"Product {product_id} has a fixed price. Negotiation is not allowed",
            403,
        )


# --- 4xxx: Negotiation ---

class OfferTooLowError(AppError):
    def __init__(self, proposed_cents: int, min_allowed_cents: int) -> None:
        super().__init__(
            4001,
            f"Offer too low. Minimum allowed is {min_allowed_cents} cents",
            400,
            data={"proposed_cents": proposed_cents, "min_allowed_cents": min_allowed_cents},
        )


class SelfNegotiationError(AppError):
    def __init__(self) -> None:
        super().__init__(4002, "Cannot negotiate on your own product", 403)


class NegotiationNotFoundError(AppError):
    def __init__(self, negotiation_id: str) -> None:
        super().__init__(4004, f"Negotiation not found: {negotiation_id}", 404)


class NegotiationForbiddenError(AppError):
    def __init__(self, negotiation_id: str) -> None:
        super().__init__(4005, f"Not authorized for negotiation {negotiation_id}", 403)


class OfferNotPendingError(AppError):
    def __init__(self, negotiation_id: str, status: str) -> None:
        super().__init__(4006, f"Offer {negotiation_id} is not pending (status={status})", 400)


class InvalidStatusTransitionError(AppError):
    def __init__(self, status: str) -> None:
        super().__init__(4007, f"Cannot transition a negotiation to status {status}", 400)


class ConversationNotFoundError(AppError):
    def __init__(self, product_id: str, buyer_id: str) -> None:
        super().__init__(
            4008, f"No conversation with buyer {buyer_id} on product {product_id}", 404
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class RequestValidationFailedError(AppError):
    def __init__(self, errors: list[dict[str, Any]]) -> None:
        super().__init__(9003, "Request validation failed", 400, data={"errors": errors})
