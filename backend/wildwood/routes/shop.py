"""
Wildwood Zoo Backend — Product, Inventory & Gift Shop Route Handlers
======================================================================

What:  Three routers sharing the gift-shop domain:
       /api/products   catalog (public reads, gift-shop manager writes)
       /api/inventory  per-shop stock (staff reads, manager writes;
                       /inventory/shop/{id} is the public shop front)
       /api/shop       shop list, visitor purchase, sales history
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wildwood.database import get_db_session
from wildwood.policy import Authorize
from wildwood.schemas.common import MessageResponse, error_responses
from wildwood.schemas.shop import (
    GiftShopListResponse,
    GiftShopResponse,
    InventoryCreate,
    InventoryCreatedResponse,
    InventoryListResponse,
    InventoryQuantityUpdate,
    ProductCreate,
    ProductCreatedResponse,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
    ShopPurchaseRequest,
    ShopPurchaseResponse,
    ShopTransactionListResponse,
    ShopTransactionResponse,
)
from wildwood.security import Principal
from wildwood.services.shop_service import inventory_service, product_service, shop_service

products_router = APIRouter(prefix="/api/products", tags=["Products"])
inventory_router = APIRouter(prefix="/api/inventory", tags=["Inventory"])
shop_router = APIRouter(prefix="/api/shop", tags=["Gift Shop"])


# ══════════════════════════════════════════════════════════════════════════
# Products
# ══════════════════════════════════════════════════════════════════════════


@products_router.get("", response_model=ProductListResponse, summary="List products")
async def list_products(db: AsyncSession = Depends(get_db_session)) -> ProductListResponse:
    products = await product_service.list_products(db)
    return ProductListResponse(products=[ProductResponse.model_validate(p) for p in products])


@products_router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses=error_responses(404, 500),
    summary="Get a product",
)
async def get_product(product_id: int, db: AsyncSession = Depends(get_db_session)) -> ProductResponse:
    return ProductResponse.model_validate(await product_service.get_product(db, product_id))


@products_router.post(
    "",
    response_model=ProductCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 500),
    summary="Create a product",
)
async def create_product(
    body: ProductCreate,
    _=Depends(Authorize("products", "create")),
    db: AsyncSession = Depends(get_db_session),
) -> ProductCreatedResponse:
    product = await product_service.create_product(db, body)
    return ProductCreatedResponse(message="Product created successfully", product=ProductResponse.model_validate(product))


@products_router.patch(
    "/{product_id}",
    response_model=ProductCreatedResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Update a product",
)
async def update_product(
    product_id: int,
    body: ProductUpdate,
    _=Depends(Authorize("products", "update")),
    db: AsyncSession = Depends(get_db_session),
) -> ProductCreatedResponse:
    product = await product_service.update_product(db, product_id, body)
    return ProductCreatedResponse(message="Product updated successfully", product=ProductResponse.model_validate(product))


@products_router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Delete a product",
)
async def delete_product(
    product_id: int,
    _=Depends(Authorize("products", "delete")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await product_service.delete_product(db, product_id)
    return MessageResponse(message="Product deleted successfully")


# ══════════════════════════════════════════════════════════════════════════
# Inventory
# ══════════════════════════════════════════════════════════════════════════


@inventory_router.get(
    "",
    response_model=InventoryListResponse,
    responses=error_responses(401, 403, 500),
    summary="All stock rows with product and shop",
)
async def list_inventory(
    _=Depends(Authorize("inventory", "read")),
    db: AsyncSession = Depends(get_db_session),
) -> InventoryListResponse:
    return InventoryListResponse(inventory=await inventory_service.list_inventory(db))


@inventory_router.get(
    "/shop/{gift_shop_id}",
    response_model=InventoryListResponse,
    responses=error_responses(404, 500),
    summary="Available products of one shop",
)
async def list_shop_inventory(
    gift_shop_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> InventoryListResponse:
    return InventoryListResponse(inventory=await inventory_service.list_by_shop(db, gift_shop_id))


@inventory_router.post(
    "",
    response_model=InventoryCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Stock a product in a shop",
)
async def add_inventory(
    body: InventoryCreate,
    _=Depends(Authorize("inventory", "write")),
    db: AsyncSession = Depends(get_db_session),
) -> InventoryCreatedResponse:
    item = await inventory_service.add_item(db, body)
    return InventoryCreatedResponse(message="Inventory item added successfully", inventory_id=item.id)


@inventory_router.put(
    "/{inventory_id}",
    response_model=MessageResponse,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Set stock quantity",
)
async def set_inventory_quantity(
    inventory_id: int,
    body: InventoryQuantityUpdate,
    _=Depends(Authorize("inventory", "write")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await inventory_service.set_quantity(db, inventory_id, body.quantity_in_stock)
    return MessageResponse(message="Inventory updated successfully")


@inventory_router.delete(
    "/{inventory_id}",
    response_model=MessageResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="Remove a stock row",
)
async def remove_inventory(
    inventory_id: int,
    _=Depends(Authorize("inventory", "write")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await inventory_service.remove_item(db, inventory_id)
    return MessageResponse(message="Inventory item removed successfully")


# ══════════════════════════════════════════════════════════════════════════
# Gift shops and sales
# ══════════════════════════════════════════════════════════════════════════


@shop_router.get("/shops", response_model=GiftShopListResponse, summary="List gift shops")
async def list_shops(db: AsyncSession = Depends(get_db_session)) -> GiftShopListResponse:
    shops = await shop_service.list_shops(db)
    return GiftShopListResponse(shops=[GiftShopResponse.model_validate(s) for s in shops])


@shop_router.post(
    "/purchase",
    response_model=ShopPurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses(400, 401, 403, 404, 500),
    summary="Buy products from a gift shop",
    description="Validates availability and stock, records the sale and decrements stock atomically.",
)
async def purchase(
    body: ShopPurchaseRequest,
    principal: Principal = Depends(Authorize("shop", "purchase")),
    db: AsyncSession = Depends(get_db_session),
) -> ShopPurchaseResponse:
    return await shop_service.purchase(db, principal.id, body)


@shop_router.get(
    "/transactions",
    response_model=ShopTransactionListResponse,
    responses=error_responses(401, 403, 500),
    summary="Sales history",
    description="Visitors see their own purchases; gift shop clerks and managers see all.",
)
async def list_transactions(
    gift_shop_id: Optional[int] = Query(default=None),
    principal: Principal = Depends(Authorize("shop", "transactions")),
    db: AsyncSession = Depends(get_db_session),
) -> ShopTransactionListResponse:
    return ShopTransactionListResponse(
        transactions=await shop_service.list_transactions(db, principal, gift_shop_id),
    )


@shop_router.get(
    "/transactions/{transaction_id}",
    response_model=ShopTransactionResponse,
    responses=error_responses(401, 403, 404, 500),
    summary="One sale with its lines",
)
async def get_transaction(
    transaction_id: int,
    principal: Principal = Depends(Authorize("shop", "transactions")),
    db: AsyncSession = Depends(get_db_session),
) -> ShopTransactionResponse:
    return await shop_service.get_transaction(db, transaction_id, principal)
