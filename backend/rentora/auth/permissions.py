"""Authorization capability checks.

Every "may this actor do this?" decision goes through :func:`can` or
:func:`authorize`, parameterized by ``(actor, action, resource)``. Routes never
compare role lists themselves::

    authorize(current_user, Action.BOOKING_CONFIRM, booking)
"""

from collections.abc import Callable
from enum import Enum
from typing import Any

from rentora.errors import ForbiddenError
from rentora.models.booking import Booking
from rentora.models.enums import ADMIN_ROLES, UserRole
from rentora.models.marketplace import MarketplaceItem
from rentora.models.property import Property
from rentora.models.review import Review
from rentora.models.service import ServiceBooking
from rentora.models.user import User


class Action(str, Enum):
    BOOKING_VIEW = "booking:view"
    BOOKING_CONFIRM = "booking:confirm"
    BOOKING_CANCEL = "booking:cancel"
    BOOKING_CHECK_IN = "booking:check_in"
    BOOKING_CHECK_OUT = "booking:check_out"
    BOOKING_REFUND = "booking:refund"
    BOOKING_LIST_HOSTED = "booking:list_hosted"
    PROPERTY_CREATE = "property:create"
    PROPERTY_UPDATE = "property:update"
    PROPERTY_DELETE = "property:delete"
    REVIEW_UPDATE = "review:update"
    REVIEW_DELETE = "review:delete"
    REVIEW_BYPASS_ELIGIBILITY = "review:bypass_eligibility"
    SERVICE_MANAGE = "service:manage"
    SERVICE_BOOKING_CANCEL = "service_booking:cancel"
    SERVICE_BOOKING_FULFIL = "service_booking:fulfil"
    LISTING_UPDATE = "listing:update"
    LISTING_DELETE = "listing:delete"
    LISTING_MARK_SOLD = "listing:mark_sold"
    MARKETPLACE_MANAGE = "marketplace:manage"
    ADMIN_ACCESS = "admin:access"


Rule = Callable[[User, Any], bool]

_HOSTING_ROLES = ADMIN_ROLES | {UserRole.HOST.value}


def _is_admin(actor: User, resource: Any = None) -> bool:
    return actor.is_admin


def _can_host(actor: User, resource: Any = None) -> bool:
    return actor.role in _HOSTING_ROLES


def _booking_host(actor: User, booking: Booking) -> bool:
    return booking.host_id == actor.id or _is_admin(actor)


def _booking_party(actor: User, booking: Booking) -> bool:
    return booking.guest_id == actor.id or _booking_host(actor, booking)


def _property_owner(actor: User, prop: Property) -> bool:
    return prop.owner_id == actor.id or _is_admin(actor)


def _reviewer(actor: User, review: Review) -> bool:
    return review.reviewer_id == actor.id


def _reviewer_or_admin(actor: User, review: Review) -> bool:
    return _reviewer(actor, review) or _is_admin(actor)


def _service_customer(actor: User, booking: ServiceBooking) -> bool:
    return booking.user_id == actor.id


def _service_provider(actor: User, booking: ServiceBooking) -> bool:
    provider = booking.provider
    return (provider is not None and provider.user_id == actor.id) or _is_admin(actor)


def _seller(actor: User, item: MarketplaceItem) -> bool:
    return item.seller_id == actor.id


def _seller_or_admin(actor: User, item: MarketplaceItem) -> bool:
    return _seller(actor, item) or _is_admin(actor)


_RULES: dict[Action, Rule] = {
    Action.BOOKING_VIEW: _booking_party,
    Action.BOOKING_CONFIRM: _booking_host,
    Action.BOOKING_CANCEL: _booking_party,
    Action.BOOKING_CHECK_IN: _booking_host,
    Action.BOOKING_CHECK_OUT: _booking_host,
    Action.BOOKING_REFUND: _is_admin,
    Action.BOOKING_LIST_HOSTED: _can_host,
    Action.PROPERTY_CREATE: _can_host,
    Action.PROPERTY_UPDATE: _property_owner,
    Action.PROPERTY_DELETE: _property_owner,
    Action.REVIEW_UPDATE: _reviewer,
    Action.REVIEW_DELETE: _reviewer_or_admin,
    Action.REVIEW_BYPASS_ELIGIBILITY: _is_admin,
    Action.SERVICE_MANAGE: _is_admin,
    Action.SERVICE_BOOKING_CANCEL: _service_customer,
    Action.SERVICE_BOOKING_FULFIL: _service_provider,
    Action.LISTING_UPDATE: _seller_or_admin,
    Action.LISTING_DELETE: _seller_or_admin,
    Action.LISTING_MARK_SOLD: _seller,
    Action.MARKETPLACE_MANAGE: _is_admin,
    Action.ADMIN_ACCESS: _is_admin,
}


def can(actor: User, action: Action, resource: Any = None) -> bool:
    """Return True if ``actor`` may perform ``action`` on ``resource``."""
    if not actor.is_active:
        return False
    return _RULES[action](actor, resource)


def authorize(actor: User, action: Action, resource: Any = None) -> None:
    """Raise :class:`ForbiddenError` unless ``actor`` may perform ``action``."""
    if not can(actor, action, resource):
        raise ForbiddenError("Not authorized" if resource is not None else "Insufficient permissions")
