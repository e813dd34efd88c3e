"""
Wildwood Zoo Backend — Ticket Service
=======================================

What:  Ticket purchase (the one multi-row unit of work), ticket history,
       ticket use, price listings and the revenue report.
Who:   Called by routes/tickets.py.

Purchase Flow (POST /api/tickets/purchase):
    ┌────────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │  Validate  │───▶│ Insert ticket│───▶│ Insert addon │───▶│  Commit  │
    │  request   │    │ rows (1/unit)│    │ rows (1/type)│    │          │
    └────────────┘    └──────────────┘    └──────────────┘    └──────────┘

    Validation happens before the first INSERT, so rejected requests never
    touch the database. Any failure after that rolls back every row of the
    purchase. The session itself is closed by get_db_session.

Invariants:
    - ticket rows = sum of requested quantities
    - addon rows  = number of addon categories set to true
    - every row shares one purchase_id and end_date = start_date + 1 day
"""

import logging
import uuid
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.exceptions import DatabaseError, ValidationError
from wildwood.models.ticket import Addon, Ticket, validity_window
from wildwood.pricing import (
    ADDON_PRICES,
    DEFAULT_ENCLOSURE_ACCESS,
    TICKET_PRICES,
    addon_price,
    addon_type_listing,
    ticket_price,
    ticket_type_listing,
)
from wildwood.schemas.ticket import (
    AddonRecord,
    PriceListing,
    PurchasedItem,
    RevenueMetadata,
    RevenueReportResponse,
    RevenueRow,
    RevenueSummaryRow,
    TicketHistoryResponse,
    TicketPurchaseRequest,
    TicketPurchaseResponse,
    TicketRecord,
    TicketTypesResponse,
)

logger = logging.getLogger(__name__)

HISTORY_DEGRADED_MESSAGE = "Failed to fetch tickets, returning empty results"

# Largest quantity of one ticket category in a single purchase
MAX_TICKETS_PER_CATEGORY = 50

REVENUE_SORT_KEYS = ("date", "purchase_type", "item_name", "quantity", "total_revenue")


class TicketService:
    """
    Business logic for tickets and addons.

    Error Handling Strategy:
        Client mistakes raise ValidationError before any INSERT. Database
        failures during a purchase are rolled back, logged with the purchase id
        and re-raised as DatabaseError (generic 500). History lookups are the
        exception: they degrade to empty lists instead of failing.
    """

    # ── Purchase ──────────────────────────────────────────────────────────

    def _validate_purchase(
        self,
        request: TicketPurchaseRequest,
        today: date,
    ) -> Tuple[Dict[str, int], List[str]]:
        for category, quantity in request.tickets.items():
            if category not in TICKET_PRICES:
                raise ValidationError(message=f"Unknown ticket type: {category}", field="tickets")
            if quantity < 0:
                raise ValidationError(
                    message=f"Ticket quantity for '{category}' cannot be negative",
                    field="tickets",
                )
            if quantity > MAX_TICKETS_PER_CATEGORY:
                raise ValidationError(
                    message=f"Ticket quantity for '{category}' cannot exceed {MAX_TICKETS_PER_CATEGORY}",
                    field="tickets",
                )
        for category in request.addons:
            if category not in ADDON_PRICES:
                raise ValidationError(message=f"Unknown addon type: {category}", field="addons")

        if request.visit_date < today:
            raise ValidationError(message="Visit date cannot be in the past", field="visitDate")

        quantities = {category: qty for category, qty in request.tickets.items() if qty > 0}
        selected_addons = [category for category, chosen in request.addons.items() if chosen]
        if not quantities and not selected_addons:
            raise ValidationError(message="Select at least one ticket or addon")
        return quantities, selected_addons

    async def purchase(
        self,
        db: AsyncSession,
        visitor_id: int,
        request: TicketPurchaseRequest,
        today: Optional[date] = None,
    ) -> TicketPurchaseResponse:
        """
        Create all ticket and addon rows of one purchase atomically.

        Args:
            db: Async database session (injected by FastAPI)
            visitor_id: Buyer, taken from the bearer token
            request: Quantities per ticket category, addon selection, visit date
            today: Reference date for the past-date check (defaults to UTC today)

        Returns:
            TicketPurchaseResponse listing every created row, tickets first

        Raises:
            ValidationError: Unknown category, negative or oversized quantity, past visit date,
                             or nothing selected
            DatabaseError: Any insert failed; no row of the purchase persists
        """
        today = today or datetime.now(timezone.utc).date()
        quantities, selected_addons = self._validate_purchase(request, today)

        purchase_id = str(uuid.uuid4())
        start_date, end_date = validity_window(request.visit_date)
        items: List[PurchasedItem] = []

        try:
            for category, quantity in quantities.items():
                entry = ticket_price(category)
                for _ in range(quantity):
                    ticket = Ticket(
                        purchase_id=purchase_id,
                        visitor_id=visitor_id,
                        ticket_type=entry.label,
                        price=entry.price,
                        enclosure_access=DEFAULT_ENCLOSURE_ACCESS,
                        start_date=start_date,
                        end_date=end_date,
                        used=False,
                    )
                    db.add(ticket)
                    # Flush assigns the id without ending the transaction
                    await db.flush()
                    items.append(PurchasedItem(
                        id=ticket.id,
                        type=entry.label,
                        access=DEFAULT_ENCLOSURE_ACCESS,
                        price=float(entry.price),
                        is_addon=False,
                    ))

            for category in selected_addons:
                entry = addon_price(category)
                addon = Addon(
                    purchase_id=purchase_id,
                    visitor_id=visitor_id,
                    addon_type=category,
                    price=entry.price,
                    description=entry.label,
                    start_date=start_date,
                    end_date=end_date,
                    used=False,
                )
                db.add(addon)
                await db.flush()
                items.append(PurchasedItem(
                    id=addon.id,
                    type=f"Addon: {entry.label}",
                    access=entry.label,
                    price=float(entry.price),
                    is_addon=True,
                ))

            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(
                "Ticket purchase %s for visitor %s rolled back: %s",
                purchase_id, visitor_id, str(e),
            )
            raise DatabaseError(
                message="Failed to purchase tickets",
                context={"purchase_id": purchase_id, "error": str(e)},
            ) from e
        except Exception:
            await db.rollback()
            logger.exception("Ticket purchase %s rolled back", purchase_id)
            raise

        logger.info(
            "Purchase %s: visitor=%s tickets=%d addons=%d date=%s",
            purchase_id, visitor_id, sum(quantities.values()), len(selected_addons), start_date,
        )
        return TicketPurchaseResponse(
            message="Tickets purchased successfully",
            purchase_id=purchase_id,
            tickets=items,
        )

    # ── Listings & history ────────────────────────────────────────────────

    def list_types(self) -> TicketTypesResponse:
        return TicketTypesResponse(
            tickets=[PriceListing(**row) for row in ticket_type_listing()],
            addons=[PriceListing(**row) for row in addon_type_listing()],
        )

    async def visitor_history(self, db: AsyncSession, visitor_id: int) -> TicketHistoryResponse:
        """
        Tickets and addons of one visitor, newest visit first.

        Each regular ticket carries the comma-joined addon labels bought in the
        same purchase ("None" if there were none). A database failure yields
        empty lists plus an `error` string instead of a 500.
        """
        try:
            tickets = (await db.execute(
                select(Ticket)
                .where(Ticket.visitor_id == visitor_id)
                .order_by(Ticket.start_date.desc(), Ticket.id)
            )).scalars().all()
            addons = (await db.execute(
                select(Addon)
                .where(Addon.visitor_id == visitor_id)
                .order_by(Addon.start_date.desc(), Addon.id)
            )).scalars().all()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Ticket history for visitor %s unavailable: %s", visitor_id, str(e))
            return TicketHistoryResponse(error=HISTORY_DEGRADED_MESSAGE)

        labels_by_purchase: Dict[str, List[str]] = defaultdict(list)
        for addon in addons:
            labels_by_purchase[addon.purchase_id].append(addon.description)

        regular = []
        for ticket in tickets:
            record = TicketRecord.model_validate(ticket)
            labels = labels_by_purchase.get(ticket.purchase_id)
            record.addons = ", ".join(labels) if labels else "None"
            regular.append(record)

        return TicketHistoryResponse(
            regular_tickets=regular,
            addon_tickets=[AddonRecord.model_validate(a) for a in addons],
        )

    async def visitor_addons(self, db: AsyncSession, visitor_id: int) -> List[AddonRecord]:
        result = await db.execute(
            select(Addon)
            .where(Addon.visitor_id == visitor_id)
            .order_by(Addon.start_date.desc(), Addon.id)
        )
        return [AddonRecord.model_validate(a) for a in result.scalars().all()]

    # ── Use ───────────────────────────────────────────────────────────────

    async def use_ticket(self, db: AsyncSession, ticket_id: int) -> None:
        """
        Mark an unused ticket used, together with every unused addon of the
        same purchase. The guarded UPDATE makes a second scan a 400.
        """
        result = await db.execute(
            update(Ticket)
            .where(Ticket.id == ticket_id, Ticket.used.is_(False))
            .values(used=True)
        )
        if result.rowcount == 0:
            raise ValidationError(message="Ticket not found or already used.")

        purchase_id = (await db.execute(
            select(Ticket.purchase_id).where(Ticket.id == ticket_id)
        )).scalar_one()
        addon_result = await db.execute(
            update(Addon)
            .where(Addon.purchase_id == purchase_id, Addon.used.is_(False))
            .values(used=True)
        )
        logger.info(
            "Ticket %s used; %d addon(s) of purchase %s marked used",
            ticket_id, addon_result.rowcount, purchase_id,
        )

    # ── Revenue ───────────────────────────────────────────────────────────

    async def _revenue_rows(self, db: AsyncSession) -> List[RevenueRow]:
        rows: List[RevenueRow] = []
        ticket_q = (
            select(Ticket.start_date, Ticket.ticket_type, func.count(Ticket.id), func.sum(Ticket.price))
            .group_by(Ticket.start_date, Ticket.ticket_type)
        )
        for day, name, quantity, total in (await db.execute(ticket_q)).all():
            rows.append(RevenueRow(
                date=day, purchase_type="Ticket", item_name=name,
                quantity=quantity, total_revenue=round(float(total or 0), 2),
            ))
        addon_q = (
            select(Addon.start_date, Addon.description, func.count(Addon.id), func.sum(Addon.price))
            .group_by(Addon.start_date, Addon.description)
        )
        for day, name, quantity, total in (await db.execute(addon_q)).all():
            rows.append(RevenueRow(
                date=day, purchase_type="Addon", item_name=name,
                quantity=quantity, total_revenue=round(float(total or 0), 2),
            ))
        return rows

    async def revenue_report(
        self,
        db: AsyncSession,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        purchase_type: Optional[str] = None,
        item_name: Optional[str] = None,
        min_amount: Optional[float] = None,
        max_amount: Optional[float] = None,
        sort_by: str = "date",
        sort_direction: str = "desc",
    ) -> RevenueReportResponse:
        """
        Revenue per (visit date, purchase type, item), with filters and a
        per-type summary computed over the filtered rows.
        """
        all_rows = await self._revenue_rows(db)

        def keep(row: RevenueRow) -> bool:
            if start_date is not None and row.date < start_date:
                return False
            if end_date is not None and row.date > end_date:
                return False
            if purchase_type and purchase_type != "All" and row.purchase_type != purchase_type:
                return False
            if item_name and item_name.lower() not in row.item_name.lower():
                return False
            if min_amount is not None and row.total_revenue < min_amount:
                return False
            if max_amount is not None and row.total_revenue > max_amount:
                return False
            return True

        details = [row for row in all_rows if keep(row)]
        if sort_by not in REVENUE_SORT_KEYS:
            sort_by = "date"
        details.sort(key=lambda row: getattr(row, sort_by), reverse=sort_direction.lower() != "asc")

        totals: Dict[str, List[float]] = {}
        for row in details:
            quantity, revenue = totals.get(row.purchase_type, [0, 0.0])
            totals[row.purchase_type] = [quantity + row.quantity, revenue + row.total_revenue]
        summary = [
            RevenueSummaryRow(purchase_type=ptype, total_quantity=int(q), total_revenue=round(r, 2))
            for ptype, (q, r) in sorted(totals.items())
        ]

        return RevenueReportResponse(
            details=details,
            summary=summary,
            metadata=RevenueMetadata(
                purchase_types=sorted({row.purchase_type for row in all_rows}),
                item_names=sorted({row.item_name for row in all_rows}),
                total_count=len(all_rows),
                filtered_count=len(details),
            ),
        )


# Module-level singleton
ticket_service = TicketService()
