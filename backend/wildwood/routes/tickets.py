"""
Wildwood Zoo Backend — Ticket Route Handlers
==============================================

What:  Ticket purchase, price listings, visitor history, ticket use and the
       manager revenue report.
Who:   Plan-a-visit and ticket pages (visitors), gate scanners (use), and the
       manager dashboard (revenue).

Purchase contract (POST /api/tickets/purchase):
    Body:     {"tickets": {"adult": 2}, "addons": {"parking": true}, "visitDate": "2025-06-01"}
    201:      {"message", "purchase_id", "tickets": [{id, type, access, price, is_addon}]}
    400:      unknown category, negative quantity, past date, nothing selected
    500:      database failure; no row of the purchase is kept

History degradation:
    GET /api/tickets/visitor/{id} never answers 500 for a database failure;
    it returns 200 with empty lists and an `error` string so the ticket page
    still renders.
"""

import logging
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.policy import Authorize
from wildwood.schemas.common import MessageResponse, error_responses
from wildwood.schemas.ticket import (
    AddonRecord,
    RevenueReportResponse,
    TicketHistoryResponse,
    TicketPurchaseRequest,
    TicketPurchaseResponse,
    TicketTypesResponse,
)
from wildwood.security import Principal
from wildwood.services.ticket_service import ticket_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


@router.get(
    "/types",
    response_model=TicketTypesResponse,
    summary="Ticket and addon prices",
    description="Served from the same price table the purchase uses.",
)
async def ticket_types() -> TicketTypesResponse:
    return ticket_service.list_types()


@router.post(
    "/purchase",
    response_model=TicketPurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 500),
    summary="Buy tickets and addons",
    description=(
        "Creates one ticket row per unit and one addon row per selected addon, "
        "all sharing a purchase id and valid from visitDate to the next day. "
        "All rows are written in a single transaction."
    ),
)
async def purchase_tickets(
    body: TicketPurchaseRequest,
    principal: Principal = Depends(Authorize("tickets", "purchase")),
    db: AsyncSession = Depends(get_db_session),
) -> TicketPurchaseResponse:
    """
    Purchase tickets for the authenticated visitor.

    The buyer is always the token's principal; a visitor id in the body would
    be ignored, so nobody can buy on someone else's account.
    """
    return await ticket_service.purchase(db, principal.id, body)


@router.get(
    "/revenue",
    response_model=RevenueReportResponse,
    responses=error_responses(400, 401, 403, 500),
    summary="Ticket revenue report (managers)",
)
async def revenue_report(
    start_date: Optional[date] = Query(default=None, description="Visit date on or after"),
    end_date: Optional[date] = Query(default=None, description="Visit date on or before"),
    purchase_type: Optional[Literal["All", "Ticket", "Addon"]] = Query(default=None),
    item_name: Optional[str] = Query(default=None, description="Substring of the item name"),
    min_amount: Optional[float] = Query(default=None, description="Minimum row revenue"),
    max_amount: Optional[float] = Query(default=None, description="Maximum row revenue"),
    sort_by: Literal["date", "purchase_type", "item_name", "quantity", "total_revenue"] = Query(default="date"),
    sort_direction: Literal["asc", "desc"] = Query(default="desc"),
    _=Depends(Authorize("tickets", "revenue")),
    db: AsyncSession = Depends(get_db_session),
) -> RevenueReportResponse:
    return await ticket_service.revenue_report(
        db,
        start_date=start_date,
        end_date=end_date,
        purchase_type=purchase_type,
        item_name=item_name,
        min_amount=min_amount,
        max_amount=max_amount,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )


@router.get(
    "/visitor/{visitor_id}",
    response_model=TicketHistoryResponse,
    responses=error_responses(401, 403),
    summary="A visitor's tickets and addons",
)
async def visitor_tickets(
    visitor_id: int,
    _=Depends(Authorize("tickets", "history", owner_param="visitor_id")),
    db: AsyncSession = Depends(get_db_session),
) -> TicketHistoryResponse:
    return await ticket_service.visitor_history(db, visitor_id)


@router.get(
    "/visitor/{visitor_id}/addons",
    response_model=List[AddonRecord],
    responses=error_responses(401, 403, 500),
    summary="A visitor's addons",
)
async def visitor_addons(
    visitor_id: int,
    _=Depends(Authorize("tickets", "history", owner_param="visitor_id")),
    db: AsyncSession = Depends(get_db_session),
) -> List[AddonRecord]:
    return await ticket_service.visitor_addons(db, visitor_id)


@router.post(
    "/use/{ticket_id}",
    response_model=MessageResponse,
    responses=error_responses(400, 500),
    summary="Mark a ticket used",
    description=(
        "Opened from the QR code printed on the ticket, so no token is required. "
        "Also marks the purchase's unused addons. Missing or already used → 400."
    ),
)
async def use_ticket(ticket_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await ticket_service.use_ticket(db, ticket_id)
    return MessageResponse(message="Ticket and associated add-ons marked as used.")
