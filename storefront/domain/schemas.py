# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional
from decimal import Decimal
from datetime import datetime


# ---------------------------------------------------------------- users

class UserCreate(BaseModel):
    """Schema dla tworzenia użytkownika."""

    id: int = Field(..., gt=0, description="ID użytkownika (musi być > 0)")
    name: str = Field(..., min_length=1, max_length=100, description="Imię użytkownika")
    email: Optional[EmailStr] = None


class UserRead(BaseModel):
    id: int
    name: str
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- products
# ograniczenia (dlugosci, kategorie, cena >= 0.01) sprawdza domain/validation.py

class ProductIn(BaseModel):
    name: str
    description: str
    price: Decimal
    stock: int = 0
    category: str
    image_url: Optional[str] = None
    is_active: bool = True
    is_featured: bool = False


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None


class StockAdjustIn(BaseModel):
    """Zmiana stanu magazynu o delte (ujemna = zdjecie ze stanu)."""

    quantity: int


class ProductOut(BaseModel):
    id: int
    name: str
    description: str
    price: Decimal
    stock: int
    category: str
    image_url: Optional[str] = None
    is_active: bool
    is_featured: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProductPage(BaseModel):
    count: int
    page: int
    limit: int
    category: Optional[str] = None
    products: List[ProductOut]


# ---------------------------------------------------------------- cart

class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    quantity: int = Field(1, gt=0, description="Ilość produktu (musi być > 0)")


class ItemUpdate(BaseModel):
    """Nowa ilosc; <= 0 usuwa pozycje z koszyka."""

    quantity: int


class CartItemOut(BaseModel):
    product_id: int
    product: Optional[ProductOut] = None
    quantity: int
    price: Decimal


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    status: str
    items: List[CartItemOut]
    total: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class CheckoutItemOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: int
    product: Optional[ProductOut] = None
    quantity: int
    price: Optional[Decimal] = None
    reason: Optional[str] = None


class CheckoutResultOut(BaseModel):
    # wynik checkoutu wychodzi w camelCase (cartId, successItems, ...)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    cart_id: int
    success_items: List[CheckoutItemOut]
    failed_items: List[CheckoutItemOut]
    completed_at: Optional[datetime] = None


class CheckoutResponse(BaseModel):
    success: bool
    message: str
    result: Optional[CheckoutResultOut] = None


# ---------------------------------------------------------------- feedback

class FeedbackIn(BaseModel):
    title: str
    description: str
    type: str = "feedback"
    rating: Optional[int] = None
    user_email: Optional[str] = None
    page_url: Optional[str] = None
    browser_info: Optional[Dict[str, Any]] = None


class FeedbackUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    rating: Optional[int] = None
    status: Optional[str] = None


class OneClickFeedbackIn(BaseModel):
    rating: int
    page_url: Optional[str] = None
    type: str = "feedback"


class BugReportIn(BaseModel):
    title: str
    description: str
    page_url: Optional[str] = None
    user_email: Optional[str] = None
    browser_info: Optional[Dict[str, Any]] = None
    screenshot: Optional[str] = Field(None, description="Sciezka/URL do juz wgranego screenshota")


class ResolveIn(BaseModel):
    admin_response: str = Field(..., min_length=1, max_length=2000)


class FeedbackOut(BaseModel):
    id: int
    title: str
    description: str
    type: str
    status: str
    rating: Optional[int] = None
    user_id: Optional[int] = None
    user_email: Optional[str] = None
    page_url: Optional[str] = None
    browser_info: Optional[Dict[str, Any]] = None
    screenshot: Optional[str] = None
    admin_response: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class FeedbackPage(BaseModel):
    items: List[FeedbackOut]
    pagination: Pagination


class FeedbackStats(BaseModel):
    total: int
    by_status: Dict[str, int]
    by_type: Dict[str, int]
    average_rating: float
    timestamp: datetime
