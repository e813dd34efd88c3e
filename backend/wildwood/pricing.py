"""
Wildwood Zoo Backend — Ticket & Addon Price Table
===================================================

What:  The single authoritative price list for entry tickets and addons.
Who:   Read by TicketService for purchases and by GET /api/tickets/types.

Prices are Decimal so that stored amounts never pick up float rounding;
the API layer converts to float when serializing.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List


@dataclass(frozen=True)
class PriceEntry:
    """One purchasable category: request key, display label, unit price."""
    key: str
    label: str
    price: Decimal


TICKET_PRICES: Dict[str, PriceEntry] = {
    "adult": PriceEntry("adult", "Adult", Decimal("24.99")),
    "child": PriceEntry("child", "Child", Decimal("16.99")),
    "senior": PriceEntry("senior", "Senior", Decimal("19.99")),
}

ADDON_PRICES: Dict[str, PriceEntry] = {
    "feeding": PriceEntry("feeding", "Animal Feeding Experience", Decimal("5.99")),
    "guidedTour": PriceEntry("guidedTour", "Guided Zoo Tour", Decimal("12.99")),
    "animalEncounter": PriceEntry("animalEncounter", "Animal Encounter", Decimal("25.99")),
    "parking": PriceEntry("parking", "Parking Pass", Decimal("15.00")),
}

# Regular tickets grant no enclosure-specific access
DEFAULT_ENCLOSURE_ACCESS = "None"


def ticket_price(category: str) -> PriceEntry:
    """Look up a ticket category; raises KeyError for unknown categories."""
    return TICKET_PRICES[category]


def addon_price(category: str) -> PriceEntry:
    """Look up an addon category; raises KeyError for unknown categories."""
    return ADDON_PRICES[category]


def ticket_type_listing() -> List[dict]:
    return [{"type": e.label, "key": e.key, "price": float(e.price)} for e in TICKET_PRICES.values()]


def addon_type_listing() -> List[dict]:
    return [{"type": e.label, "key": e.key, "price": float(e.price)} for e in ADDON_PRICES.values()]
