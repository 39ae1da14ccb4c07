"""
Database Schemas for the Storefront API

Each Pydantic model represents a MongoDB collection. The collection name is the lowercase of the class name.

- Product -> "product"
- User -> "user" (the cart is embedded in the user document)
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Product(BaseModel):
    name: str = Field(..., description="Product name")
    description: str = Field(..., description="Product description")
    price: float = Field(..., ge=0, description="Unit price")
    category: str = Field(..., description="Product category")
    pictures: List[str] = Field(default_factory=list, description="Picture URLs")
    stocks: int = Field(..., ge=0, description="Units available")


class Cart(BaseModel):
    """Product id -> reserved quantity, plus the aggregate count and total.

    `count` always equals the sum of `items`; entries never hold zero.
    `total` is the exact sum of the caller-supplied prices, kept at or above
    0; an empty cart totals 0. Round it only when rendering.
    """
    items: Dict[str, int] = Field(default_factory=dict)
    count: int = 0
    total: float = 0

    def quantity(self, product_id: str) -> int:
        return self.items.get(product_id, 0)

    def add(self, product_id: str, quantity: int, price: float) -> None:
        self.items[product_id] = self.quantity(product_id) + quantity
        self.count += quantity
        self._shift_total(quantity * price)

    def take(self, product_id: str, quantity: int, price: float) -> None:
        remaining = self.quantity(product_id) - quantity
        if remaining > 0:
            self.items[product_id] = remaining
        else:
            self.items.pop(product_id, None)
        self.count = max(self.count - quantity, 0)
        self._shift_total(-quantity * price)

    def _shift_total(self, amount: float) -> None:
        self.total = max(self.total + amount, 0) if self.count else 0

    def rendered(self) -> dict:
        out = self.model_dump()
        out["total"] = round(self.total, 2)
        return out


class User(BaseModel):
    name: str = Field(..., description="Full name")
    email: EmailStr = Field(..., description="Email address")
    password_hash: str = Field(..., description="Hashed password")
    is_admin: bool = Field(False, description="May delete catalog products")
    cart: Cart = Field(default_factory=Cart)


# Request bodies

class ProductCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    price: float = Field(..., ge=0)
    category: str
    pictures: List[str] = Field(default_factory=list, alias="images")
    stocks: int = Field(..., ge=0)


class ProductUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    pictures: Optional[List[str]] = Field(None, alias="images")
    stocks: Optional[int] = Field(None, ge=0)


class DeleteRequest(BaseModel):
    user_id: str


class CartRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    product_id: str = Field(..., alias="productId")
    price: float = Field(..., ge=0)


class AddToCartRequest(CartRequest):
    quantity: int = Field(..., ge=1)


class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    email: EmailStr
    password: str
