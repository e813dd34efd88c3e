"""
Wildwood Zoo Backend — Ticket Schemas
=======================================

What:  Purchase request/result, ticket history, price listings, revenue report.

Purchase request:
    {"tickets": {"adult": 2}, "addons": {"parking": true}, "visitDate": "2025-06-01"}
    Category keys are checked against the price table by TicketService, not
    here, so unknown keys produce a 400 naming the offending category.
    Quantities must be JSON integers and selections JSON booleans; "2" or
    true as a quantity is a 400.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt


class TicketPurchaseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tickets: Dict[str, StrictInt] = Field(default_factory=dict, description="Quantity per ticket category")
    addons: Dict[str, StrictBool] = Field(default_factory=dict, description="Selected addon categories")
    visit_date: date = Field(alias="visitDate", description="Day of the visit (ISO date)")


class PurchasedItem(BaseModel):
    id: int
    type: str
    access: str
    price: float
    is_addon: bool


class TicketPurchaseResponse(BaseModel):
    message: str
    purchase_id: str
    tickets: List[PurchasedItem]


class PriceListing(BaseModel):
    type: str
    key: str
    price: float


class TicketTypesResponse(BaseModel):
    tickets: List[PriceListing]
    addons: List[PriceListing]


class TicketRecord(BaseModel):
    id: int
    purchase_id: str
    visitor_id: int
    ticket_type: str
    price: float
    enclosure_access: str
    start_date: date
    end_date: date
    used: bool
    purchased_at: datetime
    addons: str = Field(default="None", description="Comma-joined addon labels from the same purchase")

    model_config = {"from_attributes": True}


class AddonRecord(BaseModel):
    id: int
    purchase_id: str
    visitor_id: int
    addon_type: str
    price: float
    description: str
    start_date: date
    end_date: date
    used: bool
    purchased_at: datetime

    model_config = {"from_attributes": True}


class TicketHistoryResponse(BaseModel):
    regular_tickets: List[TicketRecord] = Field(default_factory=list)
    addon_tickets: List[AddonRecord] = Field(default_factory=list)
    error: Optional[str] = None


class RevenueRow(BaseModel):
    date: date
    purchase_type: str
    item_name: str
    quantity: int
    total_revenue: float


class RevenueSummaryRow(BaseModel):
    purchase_type: str
    total_quantity: int
    total_revenue: float


class RevenueMetadata(BaseModel):
    purchase_types: List[str]
    item_names: List[str]
    total_count: int
    filtered_count: int


class RevenueReportResponse(BaseModel):
    details: List[RevenueRow]
    summary: List[RevenueSummaryRow]
    metadata: RevenueMetadata
