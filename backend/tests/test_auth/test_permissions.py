"""Unit tests for the authorization capability checks."""

import uuid

import pytest

from rentora.auth.permissions import Action, authorize, can
from rentora.errors import ForbiddenError
from rentora.models.booking import Booking
from rentora.models.enums import UserRole
from rentora.models.marketplace import MarketplaceItem
from rentora.models.property import Property
from rentora.models.review import Review
from rentora.models.service import ServiceBooking, ServiceProvider
from rentora.models.user import User


def _user(role: UserRole = UserRole.USER, active: bool = True) -> User:
    return User(id=uuid.uuid4(), email="x@test.com", role=role.value, is_active=active)


@pytest.fixture
def guest() -> User:
    return _user()


@pytest.fixture
def host() -> User:
    return _user(UserRole.HOST)


@pytest.fixture
def admin() -> User:
    return _user(UserRole.ADMIN)


@pytest.fixture
def booking(guest: User, host: User) -> Booking:
    return Booking(id=uuid.uuid4(), guest_id=guest.id, host_id=host.id)


class TestBookingCapabilities:
    def test_guest_can_view_and_cancel(self, guest, booking):
        assert can(guest, Action.BOOKING_VIEW, booking)
        assert can(guest, Action.BOOKING_CANCEL, booking)

    def test_guest_cannot_confirm(self, guest, booking):
        assert not can(guest, Action.BOOKING_CONFIRM, booking)

    def test_host_can_confirm_and_check_in(self, host, booking):
        assert can(host, Action.BOOKING_CONFIRM, booking)
        assert can(host, Action.BOOKING_CHECK_IN, booking)
        assert can(host, Action.BOOKING_CHECK_OUT, booking)

    def test_stranger_cannot_view(self, booking):
        assert not can(_user(), Action.BOOKING_VIEW, booking)

    def test_admin_can_do_everything_on_a_booking(self, admin, booking):
        for action in (Action.BOOKING_VIEW, Action.BOOKING_CONFIRM, Action.BOOKING_CANCEL, Action.BOOKING_REFUND):
            assert can(admin, action, booking)

    def test_only_admins_refund(self, guest, host, booking):
        assert not can(guest, Action.BOOKING_REFUND, booking)
        assert not can(host, Action.BOOKING_REFUND, booking)
        assert can(_user(UserRole.SUPER_ADMIN), Action.BOOKING_REFUND, booking)


class TestPropertyCapabilities:
    def test_plain_user_cannot_list_properties(self, guest):
        assert not can(guest, Action.PROPERTY_CREATE)

    def test_host_and_admin_can_list(self, host, admin):
        assert can(host, Action.PROPERTY_CREATE)
        assert can(admin, Action.PROPERTY_CREATE)

    def test_owner_can_update(self, host):
        prop = Property(id=uuid.uuid4(), owner_id=host.id)
        assert can(host, Action.PROPERTY_UPDATE, prop)
        assert not can(_user(UserRole.HOST), Action.PROPERTY_UPDATE, prop)


class TestReviewCapabilities:
    def test_only_reviewer_updates(self, guest, admin):
        review = Review(id=uuid.uuid4(), reviewer_id=guest.id)
        assert can(guest, Action.REVIEW_UPDATE, review)
        assert not can(admin, Action.REVIEW_UPDATE, review)

    def test_admin_may_delete(self, guest, admin):
        review = Review(id=uuid.uuid4(), reviewer_id=guest.id)
        assert can(admin, Action.REVIEW_DELETE, review)
        assert not can(_user(), Action.REVIEW_DELETE, review)

    def test_admin_bypasses_eligibility(self, guest, admin):
        assert can(admin, Action.REVIEW_BYPASS_ELIGIBILITY)
        assert not can(guest, Action.REVIEW_BYPASS_ELIGIBILITY)


class TestServiceBookingCapabilities:
    def test_provider_fulfils_customer_cancels(self, guest):
        provider_user = _user(UserRole.SERVICE_PROVIDER)
        booking = ServiceBooking(
            id=uuid.uuid4(),
            user_id=guest.id,
            provider=ServiceProvider(id=uuid.uuid4(), user_id=provider_user.id),
        )
        assert can(provider_user, Action.SERVICE_BOOKING_FULFIL, booking)
        assert not can(guest, Action.SERVICE_BOOKING_FULFIL, booking)
        assert can(guest, Action.SERVICE_BOOKING_CANCEL, booking)
        assert not can(provider_user, Action.SERVICE_BOOKING_CANCEL, booking)


class TestListingCapabilities:
    def test_seller_and_admin_manage(self, guest, admin):
        item = MarketplaceItem(id=uuid.uuid4(), seller_id=guest.id)
        for action in (Action.LISTING_UPDATE, Action.LISTING_DELETE):
            assert can(guest, action, item)
            assert can(admin, action, item)
            assert not can(_user(), action, item)

    def test_only_seller_marks_sold(self, guest, admin):
        item = MarketplaceItem(id=uuid.uuid4(), seller_id=guest.id)
        assert can(guest, Action.LISTING_MARK_SOLD, item)
        assert not can(admin, Action.LISTING_MARK_SOLD, item)

    def test_categories_are_admin_only(self, guest, host, admin):
        assert can(admin, Action.MARKETPLACE_MANAGE)
        assert not can(host, Action.MARKETPLACE_MANAGE)
        assert not can(guest, Action.MARKETPLACE_MANAGE)


class TestAuthorize:
    def test_inactive_actor_is_refused(self, booking):
        admin = _user(UserRole.ADMIN, active=False)
        assert not can(admin, Action.BOOKING_VIEW, booking)

    def test_raises_forbidden(self, guest):
        with pytest.raises(ForbiddenError) as exc_info:
            authorize(guest, Action.ADMIN_ACCESS)
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Insufficient permissions"

    def test_resource_message(self, booking):
        with pytest.raises(ForbiddenError, match="Not authorized"):
            authorize(_user(), Action.BOOKING_VIEW, booking)

    def test_passes_silently(self, admin):
        assert authorize(admin, Action.ADMIN_ACCESS) is None
