"""
Wildwood Zoo Backend — ORM Models Package

Importing this package registers every table with Base.metadata, which is
what Alembic autogenerate and Database.create_all rely on.
"""

from wildwood.models.animal import Animal
from wildwood.models.attraction import Attraction, StaffAttractionAssignment
from wildwood.models.enclosure import Enclosure
from wildwood.models.gift_shop import GiftShop, Inventory, ShopOrder, ShopTransaction
from wildwood.models.notification import Notification
from wildwood.models.observation import Observation
from wildwood.models.product import Product
from wildwood.models.staff import Staff
from wildwood.models.ticket import Addon, Ticket
from wildwood.models.visitor import Visitor

__all__ = [
    "Addon",
    "Animal",
    "Attraction",
    "Enclosure",
    "GiftShop",
    "Inventory",
    "Notification",
    "Observation",
    "Product",
    "ShopOrder",
    "ShopTransaction",
    "Staff",
    "StaffAttractionAssignment",
    "Ticket",
    "Visitor",
]
