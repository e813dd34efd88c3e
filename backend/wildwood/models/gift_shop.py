"""
Wildwood Zoo Backend — Gift Shop, Inventory and Sales Models
==============================================================

What:  ORM models for gift shops, their per-product stock, and completed
       sales (`shop_transactions` header + `shop_orders` lines).

Sales rows are written only by ShopService.purchase(), which validates
availability and stock, inserts the sale and decrements stock in one
transaction. Order lines snapshot product name and unit price so that later
catalog edits do not rewrite sales history.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wildwood.database import Base


class GiftShop(Base):
    __tablename__ = "gift_shops"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)

    def __repr__(self) -> str:
        return f"<GiftShop(id={self.id}, name='{self.name}')>"


class Inventory(Base):
    __tablename__ = "inventory"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    gift_shop_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("gift_shops.id", ondelete="CASCADE"),
        nullable=False,
    )
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )
    quantity_in_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # One stock row per (shop, product)
    __table_args__ = (
        UniqueConstraint("gift_shop_id", "product_id", name="uq_inventory_shop_product"),
    )

    def __repr__(self) -> str:
        return (
            f"<Inventory(id={self.id}, shop={self.gift_shop_id}, "
            f"product={self.product_id}, qty={self.quantity_in_stock})>"
        )


class ShopTransaction(Base):
    __tablename__ = "shop_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    visitor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("visitors.id"),
        nullable=False,
        index=True,
    )
    gift_shop_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("gift_shops.id"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    total_paid: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    # Only the last four digits are ever stored
    card_last_four: Mapped[str] = mapped_column(String(4), nullable=False)

    orders: Mapped[List["ShopOrder"]] = relationship(
        back_populates="transaction",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<ShopTransaction(id={self.id}, total={self.total_paid})>"


class ShopOrder(Base):
    __tablename__ = "shop_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    transaction_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("shop_transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )
    product_name: Mapped[str] = mapped_column(String(150), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    transaction: Mapped["ShopTransaction"] = relationship(back_populates="orders")

    @property
    def subtotal(self) -> float:
        return round(self.unit_price * self.quantity, 2)
