"""String enums shared by models, schemas, and services.

Values are stored in plain ``String`` columns; always persist ``.value``.
"""

from enum import Enum


class UserRole(str, Enum):
    USER = "USER"
    HOST = "HOST"
    SERVICE_PROVIDER = "SERVICE_PROVIDER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


ADMIN_ROLES: frozenset[str] = frozenset({UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value})


class PropertyType(str, Enum):
    ROOM = "ROOM"
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    VILLA = "VILLA"
    OFFICE = "OFFICE"
    SHOP = "SHOP"
    LAND = "LAND"
    HOSTEL = "HOSTEL"
    HOTEL = "HOTEL"


class PriceUnit(str, Enum):
    """Billing unit a property's base price is quoted against."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class PropertyStatus(str, Enum):
    PENDING_VERIFICATION = "PENDING_VERIFICATION"
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    REJECTED = "REJECTED"


class BookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    REFUNDED = "REFUNDED"


class ServiceBookingStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ItemCondition(str, Enum):
    NEW = "NEW"
    LIKE_NEW = "LIKE_NEW"
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


class ListingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    INACTIVE = "INACTIVE"
