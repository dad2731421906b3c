"""SQLAlchemy models for Rentora.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from rentora.models.booking import Booking
from rentora.models.conversation import Conversation, ConversationParticipant, Message
from rentora.models.favorite import FavoriteProperty
from rentora.models.marketplace import MarketplaceCategory, MarketplaceItem
from rentora.models.notification import Notification
from rentora.models.property import Property
from rentora.models.review import Review
from rentora.models.service import Service, ServiceBooking, ServiceCategory, ServiceProvider
from rentora.models.user import User

__all__ = [
    "Booking",
    "Conversation",
    "ConversationParticipant",
    "FavoriteProperty",
    "MarketplaceCategory",
    "MarketplaceItem",
    "Message",
    "Notification",
    "Property",
    "Review",
    "Service",
    "ServiceBooking",
    "ServiceCategory",
    "ServiceProvider",
    "User",
]
