"""
Wildwood Zoo Backend — Product, Inventory & Gift Shop Services
================================================================

What:  Catalog CRUD, per-shop stock and gift-shop sales.

Sale Flow (POST /api/shop/purchase):
    ┌────────────────┐    ┌──────────────┐    ┌────────────────┐    ┌─────────┐
    │ Check shop,    │───▶│ Insert sale  │───▶│ Insert lines,  │───▶│ Commit  │
    │ products, stock│    │ header       │    │ decrement stock│    │         │
    └────────────────┘    └──────────────┘    └────────────────┘    └─────────┘

    Like the ticket purchase, the sale is all-or-nothing: any failure rolls
    back the header, every line and every stock decrement.
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wildwood.exceptions import DatabaseError, NotFoundError, ValidationError, ZooError
from wildwood.models.gift_shop import GiftShop, Inventory, ShopOrder, ShopTransaction
from wildwood.models.product import Product
from wildwood.schemas.shop import (
    InventoryCreate,
    InventoryResponse,
    OrderLineResponse,
    ProductCreate,
    ProductUpdate,
    ShopPurchaseRequest,
    ShopPurchaseResponse,
    ShopTransactionResponse,
)
from wildwood.security import Principal
from wildwood.services.base import apply_changes, get_or_404

logger = logging.getLogger(__name__)


class ProductService:

    async def list_products(self, db: AsyncSession) -> List[Product]:
        result = await db.execute(select(Product).order_by(Product.category, Product.name))
        return list(result.scalars().all())

    async def get_product(self, db: AsyncSession, product_id: int) -> Product:
        return await get_or_404(db, Product, product_id, "product")

    async def create_product(self, db: AsyncSession, data: ProductCreate) -> Product:
        product = Product(**data.model_dump())
        db.add(product)
        await db.flush()
        logger.info("Product created: %s (id=%s)", product.name, product.id)
        return product

    async def update_product(self, db: AsyncSession, product_id: int, patch: ProductUpdate) -> Product:
        changes = patch.changes()
        product = await get_or_404(db, Product, product_id, "product")
        apply_changes(product, changes)
        await db.flush()
        logger.info("Product %s updated: %s", product_id, sorted(changes))
        return product

    async def delete_product(self, db: AsyncSession, product_id: int) -> None:
        product = await get_or_404(db, Product, product_id, "product")
        await db.delete(product)
        await db.flush()
        logger.info("Product %s deleted", product_id)


class InventoryService:

    def _joined(self):
        return (
            select(Inventory, Product, GiftShop.name)
            .join(Product, Inventory.product_id == Product.id)
            .join(GiftShop, Inventory.gift_shop_id == GiftShop.id)
        )

    def _to_response(self, inventory: Inventory, product: Product, shop_name: str) -> InventoryResponse:
        return InventoryResponse(
            id=inventory.id,
            gift_shop_id=inventory.gift_shop_id,
            gift_shop_name=shop_name,
            product_id=product.id,
            product_name=product.name,
            category=product.category,
            price=product.price,
            available=product.available,
            quantity_in_stock=inventory.quantity_in_stock,
        )

    async def list_inventory(self, db: AsyncSession) -> List[InventoryResponse]:
        rows = (await db.execute(self._joined().order_by(GiftShop.name, Product.name))).all()
        return [self._to_response(*row) for row in rows]

    async def list_by_shop(self, db: AsyncSession, gift_shop_id: int) -> List[InventoryResponse]:
        """Public shop listing: available products only."""
        await get_or_404(db, GiftShop, gift_shop_id, "gift shop")
        rows = (await db.execute(
            self._joined()
            .where(Inventory.gift_shop_id == gift_shop_id, Product.available.is_(True))
            .order_by(Product.name)
        )).all()
        return [self._to_response(*row) for row in rows]

    async def add_item(self, db: AsyncSession, data: InventoryCreate) -> Inventory:
        await get_or_404(db, GiftShop, data.gift_shop_id, "gift shop")
        await get_or_404(db, Product, data.product_id, "product")
        existing = (await db.execute(
            select(Inventory.id).where(
                Inventory.gift_shop_id == data.gift_shop_id,
                Inventory.product_id == data.product_id,
            )
        )).first()
        if existing is not None:
            raise ValidationError(message="This product already exists in the selected gift shop's inventory")

        item = Inventory(**data.model_dump())
        db.add(item)
        await db.flush()
        logger.info("Inventory %s: product %s stocked at shop %s", item.id, item.product_id, item.gift_shop_id)
        return item

    async def set_quantity(self, db: AsyncSession, inventory_id: int, quantity: int) -> Inventory:
        item = await get_or_404(db, Inventory, inventory_id, "inventory item")
        item.quantity_in_stock = quantity
        await db.flush()
        return item

    async def remove_item(self, db: AsyncSession, inventory_id: int) -> None:
        item = await get_or_404(db, Inventory, inventory_id, "inventory item")
        await db.delete(item)
        await db.flush()
        logger.info("Inventory %s removed", inventory_id)


class ShopService:
    """Gift shops, sales and sales history."""

    async def list_shops(self, db: AsyncSession) -> List[GiftShop]:
        result = await db.execute(select(GiftShop).order_by(GiftShop.name))
        return list(result.scalars().all())

    async def purchase(
        self,
        db: AsyncSession,
        visitor_id: int,
        request: ShopPurchaseRequest,
    ) -> ShopPurchaseResponse:
        """
        Sell products from one gift shop to a visitor in a single transaction.

        Raises:
            NotFoundError: Unknown gift shop
            ValidationError: Product missing or unavailable, or not enough stock
            DatabaseError: A write failed; nothing of the sale persists
        """
        # Merge repeated lines for the same product
        quantities: Dict[int, int] = OrderedDict()
        for line in request.products:
            quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity

        try:
            await get_or_404(db, GiftShop, request.gift_shop_id, "gift shop")

            products: Dict[int, Product] = {}
            total = 0.0
            for product_id, quantity in quantities.items():
                product = await db.get(Product, product_id)
                if product is None or not product.available:
                    raise ValidationError(message=f"Product {product_id} not found or not available")
                stock = (await db.execute(
                    select(Inventory.quantity_in_stock).where(
                        Inventory.gift_shop_id == request.gift_shop_id,
                        Inventory.product_id == product_id,
                    )
                )).scalar_one_or_none()
                if stock is None or stock < quantity:
                    raise ValidationError(message=f"Not enough stock for product {product_id}")
                products[product_id] = product
                total += product.price * quantity

            sale = ShopTransaction(
                visitor_id=visitor_id,
                gift_shop_id=request.gift_shop_id,
                total_paid=round(total, 2),
                card_last_four=request.card_number[-4:],
            )
            db.add(sale)
            await db.flush()

            for product_id, quantity in quantities.items():
                product = products[product_id]
                db.add(ShopOrder(
                    transaction_id=sale.id,
                    product_id=product_id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=product.price,
                ))
                # Guarded decrement: a concurrent sale that drained the stock fails here
                result = await db.execute(
                    update(Inventory)
                    .where(
                        Inventory.gift_shop_id == request.gift_shop_id,
                        Inventory.product_id == product_id,
                        Inventory.quantity_in_stock >= quantity,
                    )
                    .values(quantity_in_stock=Inventory.quantity_in_stock - quantity)
                )
                if result.rowcount == 0:
                    raise ValidationError(message=f"Not enough stock for product {product_id}")
            await db.flush()
            await db.commit()
        except ZooError:
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Gift shop sale for visitor %s rolled back: %s", visitor_id, str(e))
            raise DatabaseError(message="Failed to process purchase", context={"error": str(e)}) from e

        logger.info(
            "Gift shop sale %s: visitor=%s shop=%s total=%.2f",
            sale.id, visitor_id, request.gift_shop_id, sale.total_paid,
        )
        return ShopPurchaseResponse(
            message="Purchase completed successfully",
            transaction_id=sale.id,
            total_paid=sale.total_paid,
        )

    def _to_response(self, sale: ShopTransaction, shop_name: Optional[str]) -> ShopTransactionResponse:
        return ShopTransactionResponse(
            id=sale.id,
            visitor_id=sale.visitor_id,
            gift_shop_id=sale.gift_shop_id,
            gift_shop_name=shop_name,
            created_at=sale.created_at,
            total_paid=sale.total_paid,
            card_last_four=sale.card_last_four,
            items=[OrderLineResponse.model_validate(order) for order in sale.orders],
        )

    def _query(self):
        return (
            select(ShopTransaction, GiftShop.name)
            .join(GiftShop, ShopTransaction.gift_shop_id == GiftShop.id)
            .options(selectinload(ShopTransaction.orders))
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        principal: Principal,
        gift_shop_id: Optional[int] = None,
    ) -> List[ShopTransactionResponse]:
        """Visitors see their own sales; clerks and managers see all."""
        query = self._query().order_by(ShopTransaction.created_at.desc(), ShopTransaction.id.desc())
        if principal.is_visitor:
            query = query.where(ShopTransaction.visitor_id == principal.id)
        if gift_shop_id is not None:
            query = query.where(ShopTransaction.gift_shop_id == gift_shop_id)
        rows = (await db.execute(query)).all()
        return [self._to_response(sale, shop_name) for sale, shop_name in rows]

    async def get_transaction(
        self,
        db: AsyncSession,
        transaction_id: int,
        principal: Principal,
    ) -> ShopTransactionResponse:
        row = (await db.execute(self._query().where(ShopTransaction.id == transaction_id))).first()
        # A visitor asking for someone else's sale gets the same 404 as a missing one
        if row is None or (principal.is_visitor and row[0].visitor_id != principal.id):
            raise NotFoundError(resource="transaction", resource_id=transaction_id)
        return self._to_response(row[0], row[1])


product_service = ProductService()
inventory_service = InventoryService()
shop_service = ShopService()
