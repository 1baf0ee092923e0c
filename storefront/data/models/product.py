# storefront/data/models/product.py
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, DateTime, CheckConstraint

from storefront.data.database import Base


CATEGORIES = ("electronics", "clothing", "home", "books", "sports", "toys", "food", "other")


def _now():
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category = Column(String(20), nullable=False, index=True)
    image_url = Column(String, nullable=True)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)

    # stock nigdy ujemny, nawet jak ktos ominie repo
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),)
