# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal
from storefront.data.models.product import ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"name": "Keyboard", "description": "Mechanical keyboard", "price": Decimal("199.99"),
     "stock": 25, "category": "electronics", "is_featured": True},
    {"name": "Mouse", "description": "Wireless mouse", "price": Decimal("49.50"),
     "stock": 100, "category": "electronics"},
    {"name": "Monitor", "description": "27 inch monitor", "price": Decimal("899.00"),
     "stock": 5, "category": "electronics", "is_featured": True},
    {"name": "Running shoes", "description": "Lightweight running shoes", "price": Decimal("329.00"),
     "stock": 12, "category": "sports"},
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return
        db.add_all(ProductModel(**p) for p in PRODUCTS)
        db.commit()
        logger.info(f"Seeded {len(PRODUCTS)} products")
    finally:
        db.close()
