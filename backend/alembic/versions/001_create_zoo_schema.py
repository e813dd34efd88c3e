"""Create the zoo schema

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Tables (in dependency order):
    visitors, staff, enclosures, animals, tickets, addons, observations,
    notifications, products, gift_shops, inventory, shop_transactions,
    shop_orders, attractions, staff_attraction_assignments

Foreign-key behaviour mirrors the ORM models:
    enclosure deleted   → its animals are deleted (CASCADE)
    animal deleted      → its observations are deleted (CASCADE)
    staff deleted       → enclosure/attraction/observation references go NULL
    transaction deleted → its order lines are deleted (CASCADE)
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=False,
    )


def upgrade() -> None:
    # ── People ────────────────────────────────────────────────────────────
    op.create_table(
        "visitors",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "membership",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'None'"),
            comment="None, Basic, Premium or Family",
        ),
        sa.Column("billing_address", sa.Text(), nullable=True),
        sa.Column("visit_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_visitors_username", "visitors", ["username"], unique=True)

    op.create_table(
        "staff",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("role", sa.String(50), nullable=False, comment="Manager or Staff"),
        sa.Column("staff_type", sa.String(50), nullable=False, comment="Zookeeper, Vet, Gift Shop Clerk, ..."),
        sa.Column("ssn", sa.String(20), nullable=False),
        sa.Column("birthdate", sa.Date(), nullable=False),
        sa.Column("sex", sa.String(10), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("hire_date", sa.Date(), nullable=False, server_default=sa.text("CURRENT_DATE")),
        sa.Column("supervisor_id", sa.Integer(), nullable=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.ForeignKeyConstraint(["supervisor_id"], ["staff.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_staff_staff_type", "staff", ["staff_type"])
    op.create_index("ix_staff_username", "staff", ["username"], unique=True)

    # ── Animals & enclosures ──────────────────────────────────────────────
    op.create_table(
        "enclosures",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(150), nullable=False),
        sa.Column("staff_id", sa.Integer(), nullable=True, comment="Responsible staff member"),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_enclosures_staff_id", "enclosures", ["staff_id"])

    op.create_table(
        "animals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("species", sa.String(100), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("gender", sa.String(20), nullable=False),
        sa.Column("health_status", sa.String(50), nullable=False),
        sa.Column("last_vet_checkup", sa.Date(), nullable=False),
        sa.Column("danger_level", sa.String(50), nullable=False),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("enclosure_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["enclosure_id"], ["enclosures.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_animals_health_status", "animals", ["health_status"])
    op.create_index("ix_animals_enclosure_id", "animals", ["enclosure_id"])

    # ── Tickets ───────────────────────────────────────────────────────────
    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("purchase_id", sa.String(36), nullable=False, comment="Groups rows bought together"),
        sa.Column("visitor_id", sa.Integer(), nullable=False),
        sa.Column("ticket_type", sa.String(50), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("enclosure_access", sa.String(100), nullable=False, server_default=sa.text("'None'")),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at("purchased_at"),
        sa.ForeignKeyConstraint(["visitor_id"], ["visitors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tickets_purchase_id", "tickets", ["purchase_id"])
    op.create_index("ix_tickets_visitor_id", "tickets", ["visitor_id"])

    op.create_table(
        "addons",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("purchase_id", sa.String(36), nullable=False),
        sa.Column("visitor_id", sa.Integer(), nullable=False),
        sa.Column("addon_type", sa.String(50), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("description", sa.String(100), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at("purchased_at"),
        sa.ForeignKeyConstraint(["visitor_id"], ["visitors.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_addons_purchase_id", "addons", ["purchase_id"])
    op.create_index("ix_addons_visitor_id", "addons", ["visitor_id"])

    # ── Observations & notifications ──────────────────────────────────────
    op.create_table(
        "observations",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("staff_id", sa.Integer(), nullable=True),
        sa.Column("animal_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
        sa.Column("acknowledged", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("acknowledged_by", sa.Integer(), nullable=True),
        sa.Column("acknowledged_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["animal_id"], ["animals.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["acknowledged_by"], ["staff.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_observations_animal_id", "observations", ["animal_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("staff_type", sa.String(50), nullable=True, comment="NULL means every staff member"),
        _created_at(),
        sa.Column("acknowledged", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_staff_type", "notifications", ["staff_type"])

    # ── Gift shops ────────────────────────────────────────────────────────
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "gift_shops",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("location", sa.String(150), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "inventory",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("gift_shop_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("quantity_in_stock", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["gift_shop_id"], ["gift_shops.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("gift_shop_id", "product_id", name="uq_inventory_shop_product"),
    )

    op.create_table(
        "shop_transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("visitor_id", sa.Integer(), nullable=False),
        sa.Column("gift_shop_id", sa.Integer(), nullable=False),
        _created_at(),
        sa.Column("total_paid", sa.Numeric(10, 2), nullable=False),
        sa.Column("card_last_four", sa.String(4), nullable=False, comment="Full card numbers are never stored"),
        sa.ForeignKeyConstraint(["visitor_id"], ["visitors.id"]),
        sa.ForeignKeyConstraint(["gift_shop_id"], ["gift_shops.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_shop_transactions_visitor_id", "shop_transactions", ["visitor_id"])
    op.create_index("ix_shop_transactions_gift_shop_id", "shop_transactions", ["gift_shop_id"])

    op.create_table(
        "shop_orders",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("transaction_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("product_name", sa.String(150), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.ForeignKeyConstraint(["transaction_id"], ["shop_transactions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_shop_orders_transaction_id", "shop_orders", ["transaction_id"])

    # ── Attractions ───────────────────────────────────────────────────────
    op.create_table(
        "attractions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location", sa.String(150), nullable=False),
        sa.Column("picture", sa.Text(), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("staff_id", sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "staff_attraction_assignments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("attraction_id", sa.Integer(), nullable=False),
        sa.Column("staff_id", sa.Integer(), nullable=False),
        _created_at("assigned_date"),
        sa.ForeignKeyConstraint(["attraction_id"], ["attractions.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["staff_id"], ["staff.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("attraction_id", "staff_id", name="uq_assignment_attraction_staff"),
    )
    op.create_index(
        "ix_staff_attraction_assignments_attraction_id",
        "staff_attraction_assignments",
        ["attraction_id"],
    )
    op.create_index(
        "ix_staff_attraction_assignments_staff_id",
        "staff_attraction_assignments",
        ["staff_id"],
    )


def downgrade() -> None:
    """
    Drop every zoo table in reverse dependency order.

    WARNING: Destructive. All zoo data is permanently lost.
    """
    op.drop_table("staff_attraction_assignments")
    op.drop_table("attractions")
    op.drop_table("shop_orders")
    op.drop_table("shop_transactions")
    op.drop_table("inventory")
    op.drop_table("gift_shops")
    op.drop_table("products")
    op.drop_table("notifications")
    op.drop_table("observations")
    op.drop_table("addons")
    op.drop_table("tickets")
    op.drop_table("animals")
    op.drop_table("enclosures")
    op.drop_table("staff")
    op.drop_table("visitors")
