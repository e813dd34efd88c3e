"""
Wildwood Zoo Backend — Product, Inventory & Gift Shop Schemas
===============================================================

What:  Catalog CRUD bodies, per-shop stock rows and the sale request/response.

Card handling:
    `card_number` is accepted on purchase only to derive the last four digits;
    no response model carries more than those four digits.
"""

from datetime import datetime
from typing import ClassVar, FrozenSet, List, Optional

from pydantic import BaseModel, Field, field_validator

from wildwood.schemas.common import PatchModel


# ══════════════════════════════════════════════════════════════════════════
# Products
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    description: Optional[str] = None
    price: float = Field(ge=0)
    category: str = Field(min_length=1, max_length=100)
    available: bool = True


class ProductUpdate(PatchModel):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"description"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    available: Optional[bool] = None


class ProductResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: str
    available: bool

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    products: List[ProductResponse]


class ProductCreatedResponse(BaseModel):
    message: str
    product: ProductResponse


# ══════════════════════════════════════════════════════════════════════════
# Inventory
# ══════════════════════════════════════════════════════════════════════════


class InventoryCreate(BaseModel):
    gift_shop_id: int
    product_id: int
    quantity_in_stock: int = Field(ge=0)


class InventoryQuantityUpdate(BaseModel):
    quantity_in_stock: int = Field(ge=0)


class InventoryResponse(BaseModel):
    id: int
    gift_shop_id: int
    gift_shop_name: str
    product_id: int
    product_name: str
    category: str
    price: float
    available: bool
    quantity_in_stock: int


class InventoryListResponse(BaseModel):
    inventory: List[InventoryResponse]


class InventoryCreatedResponse(BaseModel):
    message: str
    inventory_id: int


# ══════════════════════════════════════════════════════════════════════════
# Gift shops and sales
# ══════════════════════════════════════════════════════════════════════════


class GiftShopResponse(BaseModel):
    id: int
    name: str
    location: Optional[str] = None

    model_config = {"from_attributes": True}


class GiftShopListResponse(BaseModel):
    shops: List[GiftShopResponse]


class PurchaseLine(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)


class ShopPurchaseRequest(BaseModel):
    gift_shop_id: int
    products: List[PurchaseLine] = Field(min_length=1)
    card_number: str = Field(min_length=4, max_length=25)

    @field_validator("card_number")
    @classmethod
    def digits_only(cls, v: str) -> str:
        digits = v.replace(" ", "").replace("-", "")
        if not digits.isdigit() or len(digits) < 4:
            raise ValueError("card_number must contain at least 4 digits")
        return digits


class ShopPurchaseResponse(BaseModel):
    message: str
    transaction_id: int
    total_paid: float


class OrderLineResponse(BaseModel):
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float

    model_config = {"from_attributes": True}


class ShopTransactionResponse(BaseModel):
    id: int
    visitor_id: int
    gift_shop_id: int
    gift_shop_name: Optional[str] = None
    created_at: datetime
    total_paid: float
    card_last_four: str
    items: List[OrderLineResponse] = Field(default_factory=list)


class ShopTransactionListResponse(BaseModel):
    transactions: List[ShopTransactionResponse]
