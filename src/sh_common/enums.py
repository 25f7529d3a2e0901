"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class UserRole(str, Enum):
    CUSTOMER = "customer"
    VENDOR = "vendor"
    ADMIN = "admin"


class MessageType(str, Enum):
    TEXT = "text"
    OFFER = "offer"


class NegotiationStatus(str, Enum):
    """``none`` for plain text messages; offers start ``pending``."""
    NONE = "none"
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class StatusFilter(str, Enum):
    """Values accepted by the directory ``status`` query (``completed`` never matches)."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class OfferAction(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"


class ModerationAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class RepaymentStatus(str, Enum):
    SCHEDULED = "scheduled"
    PAID = "paid"
    FAILED = "failed"
