"""Seed the database with sample Rentora data.

Creates one account per role, a handful of listings in different billing
units, a home-service catalog, and a completed stay with a review so the
dashboards and rating aggregate have something to show.

Run from the backend directory:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete, select

from rentora.auth.passwords import hash_password
from rentora.database import async_session_factory, utcnow
from rentora.models.booking import Booking
from rentora.models.enums import (
    BookingStatus,
    ItemCondition,
    ListingStatus,
    PriceUnit,
    PropertyStatus,
    PropertyType,
    UserRole,
)
from rentora.models.marketplace import MarketplaceCategory, MarketplaceItem
from rentora.models.property import Property
from rentora.models.review import Review
from rentora.models.service import Service, ServiceCategory, ServiceProvider
from rentora.models.user import User
from rentora.services.pricing import compute_total_price, stay_length_days
from rentora.services.rating_service import refresh_property_rating

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_PASSWORD = "demo1234"

USERS = {
    "admin": {"email": "admin@rentora.dev", "first_name": "Ada", "last_name": "Admin", "role": UserRole.ADMIN},
    "host": {"email": "host@rentora.dev", "first_name": "Hana", "last_name": "Host", "role": UserRole.HOST},
    "guest": {"email": "guest@rentora.dev", "first_name": "Gus", "last_name": "Guest", "role": UserRole.USER},
    "provider": {
        "email": "provider@rentora.dev",
        "first_name": "Pia",
        "last_name": "Provider",
        "role": UserRole.SERVICE_PROVIDER,
    },
}

PROPERTIES = [
    {
        "title": "Sunny Studio near the Old Town",
        "description": "Bright furnished studio with a balcony, five minutes from the main square.",
        "type": PropertyType.APARTMENT,
        "price": Decimal("85.00"),
        "price_unit": PriceUnit.DAILY,
        "bedrooms": 1,
        "bathrooms": 1,
        "furnished": True,
        "address": "12 Market Street",
        "city": "Lisbon",
        "state": "Lisboa",
        "zip_code": "1100-001",
        "amenities": ["wifi", "ac", "kitchen"],
        "rules": ["no smoking"],
        "min_stay_days": 2,
        "max_stay_days": 30,
        "is_featured": True,
    },
    {
        "title": "Family House with Garden",
        "description": "Three bedroom house with a private garden and parking for two cars.",
        "type": PropertyType.HOUSE,
        "price": Decimal("600.00"),
        "price_unit": PriceUnit.WEEKLY,
        "bedrooms": 3,
        "bathrooms": 2,
        "furnished": True,
        "address": "4 Oak Lane",
        "city": "Porto",
        "state": "Porto",
        "zip_code": "4000-123",
        "amenities": ["wifi", "parking", "garden", "washer"],
        "rules": ["no parties", "pets allowed"],
        "min_stay_days": 7,
        "max_stay_days": None,
        "is_featured": False,
    },
    {
        "title": "Quiet Office Suite",
        "description": "Unfurnished office space on the second floor, suitable for a small team.",
        "type": PropertyType.OFFICE,
        "price": Decimal("1500.00"),
        "price_unit": PriceUnit.MONTHLY,
        "bedrooms": None,
        "bathrooms": 1,
        "furnished": False,
        "address": "88 Harbour Road",
        "city": "Lisbon",
        "state": "Lisboa",
        "zip_code": "1200-450",
        "amenities": ["wifi", "elevator"],
        "rules": [],
        "min_stay_days": 30,
        "max_stay_days": 365,
        "is_featured": False,
    },
]

SERVICE_CATALOG = {
    "category": {"name": "Cleaning", "description": "Home and end-of-stay cleaning", "icon": "broom", "order": 1},
    "service": {
        "name": "Deep Clean",
        "description": "Full apartment deep clean including kitchen and bathrooms.",
        "price_range_min": Decimal("60.00"),
        "price_range_max": Decimal("180.00"),
        "price_unit": "per visit",
    },
}

MARKETPLACE_CATALOG = {
    "category": {"name": "Furniture", "description": "Tables, chairs, sofas and storage", "icon": "sofa"},
    "item": {
        "title": "Oak dining table",
        "description": "Solid oak table that seats six. Light wear on one corner.",
        "condition": ItemCondition.GOOD.value,
        "price": Decimal("250.00"),
        "original_price": Decimal("900.00"),
        "is_negotiable": True,
        "city": "Lisbon",
    },
}


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with sample Rentora data.

    Idempotent: removes the demo accounts (and, through ON DELETE CASCADE,
    everything they own) before re-creating them.
    """
    async with async_session_factory() as session:
        emails = [u["email"] for u in USERS.values()]
        existing = (await session.execute(select(User.id).where(User.email.in_(emails)))).scalars().all()
        if existing:
            print(f"Demo accounts already exist ({len(existing)}). Deleting and re-seeding...")
            await session.execute(delete(Review).where(Review.reviewer_id.in_(existing)))
            await session.execute(delete(Booking).where(Booking.guest_id.in_(existing)))
            await session.execute(delete(Property).where(Property.owner_id.in_(existing)))
            await session.execute(delete(ServiceProvider).where(ServiceProvider.user_id.in_(existing)))
            await session.execute(delete(User).where(User.id.in_(existing)))
            await session.execute(delete(Service).where(Service.name == SERVICE_CATALOG["service"]["name"]))
            await session.execute(
                delete(ServiceCategory).where(ServiceCategory.name == SERVICE_CATALOG["category"]["name"])
            )
            await session.execute(delete(MarketplaceItem).where(MarketplaceItem.seller_id.in_(existing)))
            await session.execute(
                delete(MarketplaceCategory).where(MarketplaceCategory.name == MARKETPLACE_CATALOG["category"]["name"])
            )
            await session.flush()

        # ------------------------------------------------------------------
        # 1. Accounts
        # ------------------------------------------------------------------
        users: dict[str, User] = {}
        hashed = hash_password(DEMO_PASSWORD)
        for key, data in USERS.items():
            user = User(
                email=data["email"],
                hashed_password=hashed,
                first_name=data["first_name"],
                last_name=data["last_name"],
                role=data["role"].value,
                is_active=True,
            )
            session.add(user)
            users[key] = user
        await session.flush()
        print(f"Created {len(users)} users (password: {DEMO_PASSWORD})")

        # ------------------------------------------------------------------
        # 2. Listings
        # ------------------------------------------------------------------
        properties: list[Property] = []
        for data in PROPERTIES:
            prop = Property(
                owner_id=users["host"].id,
                status=PropertyStatus.AVAILABLE.value,
                **{k: (v.value if hasattr(v, "value") else v) for k, v in data.items()},
            )
            session.add(prop)
            properties.append(prop)
        await session.flush()
        for prop in properties:
            print(f"   {prop.title} ({prop.city}) {prop.price}/{prop.price_unit.lower()}")

        # ------------------------------------------------------------------
        # 3. Service catalog
        # ------------------------------------------------------------------
        category = ServiceCategory(**SERVICE_CATALOG["category"])
        session.add(category)
        await session.flush()
        service = Service(category_id=category.id, **SERVICE_CATALOG["service"])
        session.add(service)
        await session.flush()
        session.add(
            ServiceProvider(
                user_id=users["provider"].id,
                service_id=service.id,
                name="Pia's Cleaning Co.",
                city="Lisbon",
                years_experience=6,
                is_verified=True,
            )
        )
        await session.flush()
        print(f"Created service catalog: {category.name} / {service.name}")

        # ------------------------------------------------------------------
        # 3b. Marketplace: one second-hand listing from the guest
        # ------------------------------------------------------------------
        furniture = MarketplaceCategory(**MARKETPLACE_CATALOG["category"])
        session.add(furniture)
        await session.flush()
        item = MarketplaceItem(
            seller_id=users["guest"].id,
            category_id=furniture.id,
            status=ListingStatus.ACTIVE.value,
            **MARKETPLACE_CATALOG["item"],
        )
        session.add(item)
        await session.flush()
        print(f"Created marketplace listing: {item.title} ({furniture.name})")

        # ------------------------------------------------------------------
        # 4. Bookings: one completed stay, one upcoming request
        # ------------------------------------------------------------------
        studio = properties[0]
        now = utcnow().replace(hour=14, minute=0, second=0, microsecond=0)
        stays = [
            (now - timedelta(days=20), now - timedelta(days=16), BookingStatus.CHECKED_OUT),
            (now + timedelta(days=10), now + timedelta(days=13), BookingStatus.PENDING),
        ]
        for check_in, check_out, status in stays:
            session.add(
                Booking(
                    property_id=studio.id,
                    guest_id=users["guest"].id,
                    host_id=studio.owner_id,
                    check_in=check_in,
                    check_out=check_out,
                    guests_count=2,
                    total_price=compute_total_price(
                        studio.price, studio.price_unit, stay_length_days(check_in, check_out)
                    ),
                    status=status.value,
                )
            )
        await session.flush()
        print(f"Created {len(stays)} bookings for {studio.title}")

        # ------------------------------------------------------------------
        # 5. Review and rating aggregate
        # ------------------------------------------------------------------
        session.add(
            Review(
                reviewer_id=users["guest"].id,
                reviewee_id=studio.owner_id,
                property_id=studio.id,
                rating=5,
                comment="Spotless and right in the middle of everything.",
            )
        )
        await session.flush()
        rating, count = await refresh_property_rating(session, studio.id)
        await session.commit()

        print(f"Created {count} review; {studio.title} now rated {rating:.1f}")
        print()
        print("=" * 60)
        print("Seed Summary")
        print("=" * 60)
        for key, data in USERS.items():
            print(f"   {key:<9} {data['email']}")
        print(f"   Properties: {len(properties)}")
        print("=" * 60)
        print("Done! You can now log in at /api/v1/auth/login")


if __name__ == "__main__":
    asyncio.run(seed())
