# storefront/services/product_service.py
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel, CATEGORIES
from storefront.domain.errors import NotFoundError, ValidationError, InsufficientStockError
from storefront.domain.validation import validate_product, ensure_valid
from storefront.repos.product_repo import ProductRepo, SORTABLE_COLUMNS
from storefront.utils.settings import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def product_to_dict(p: ProductModel) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "price": p.price,
        "stock": p.stock,
        "category": p.category,
        "image_url": p.image_url,
        "is_active": p.is_active,
        "is_featured": p.is_featured,
        "created_at": p.created_at,
        "updated_at": p.updated_at,
    }


def page_bounds(page: int, limit: int | None) -> tuple[int, int]:
    """(offset, limit) z numeru strony; limit przycinany do MAX_PAGE_LIMIT."""
    if page < 1:
        raise ValidationError([{"field": "page", "message": "Page must be at least 1"}])
    limit = DEFAULT_PAGE_LIMIT if limit is None else limit
    if limit < 1:
        raise ValidationError([{"field": "limit", "message": "Limit must be at least 1"}])
    limit = min(limit, MAX_PAGE_LIMIT)
    return (page - 1) * limit, limit


def _clean(data: dict) -> dict:
    fields = dict(data)
    for key in ("name", "description"):
        if isinstance(fields.get(key), str):
            fields[key] = fields[key].strip()
    if fields.get("price") is not None:
        fields["price"] = Decimal(str(fields["price"]))
    return fields


class ProductService:
    """Katalog produktow: listowanie, wyszukiwanie, CRUD i korekty stanu."""

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    #query
    def get_product(self, product_id: int) -> Dict[str, Any]:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product_to_dict(product)

    def list_products(
        self,
        page: int = 1,
        limit: int | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        category: str | None = None,
    ) -> Dict[str, Any]:
        if sort_by not in SORTABLE_COLUMNS:
            raise ValidationError([{"field": "sort_by", "message": f"Cannot sort by {sort_by}"}])
        if category is not None and category not in CATEGORIES:
            raise ValidationError([{"field": "category", "message": "Invalid category"}])

        offset, limit = page_bounds(page, limit)
        products = self.repo.list_products(
            offset=offset,
            limit=limit,
            sort_by=sort_by,
            descending=sort_order != "asc",
            category=category,
        )
        return {
            "count": len(products),
            "page": page,
            "limit": limit,
            "category": category,
            "products": [product_to_dict(p) for p in products],
        }

    def list_featured(self, page: int = 1, limit: int | None = None) -> Dict[str, Any]:
        offset, limit = page_bounds(page, limit)
        products = self.repo.list_products(offset=offset, limit=limit, featured=True)
        return {
            "count": len(products),
            "page": page,
            "limit": limit,
            "products": [product_to_dict(p) for p in products],
        }

    def search(self, query: str, page: int = 1, limit: int | None = None) -> Dict[str, Any]:
        query = (query or "").strip()
        if not query:
            raise ValidationError([{"field": "q", "message": "Search query is required"}])

        offset, limit = page_bounds(page, limit)
        products = self.repo.search(query, offset=offset, limit=limit)
        return {
            "count": len(products),
            "page": page,
            "limit": limit,
            "products": [product_to_dict(p) for p in products],
        }

    #commands
    def create_product(self, data: dict) -> Dict[str, Any]:
        ensure_valid(validate_product(data))

        product = self.repo.create_product(ProductModel(**_clean(data)))
        logger.info(f"Utworzono produkt {product.id} ({product.name})")
        return product_to_dict(product)

    def update_product(self, product_id: int, data: dict) -> Dict[str, Any]:
        ensure_valid(validate_product(data, partial=True))

        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        updated = self.repo.update_product(product, _clean(data))
        logger.info(f"Zaktualizowano produkt {product_id}: {sorted(data)}")
        return product_to_dict(updated)

    def delete_product(self, product_id: int) -> None:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        self.repo.delete_product(product)
        logger.info(f"Usunieto produkt {product_id}")

    def adjust_stock(self, product_id: int, delta: int) -> Dict[str, Any]:
        if not self.repo.get_product(product_id):
            raise NotFoundError("Product not found")

        if not self.repo.adjust_stock(product_id, delta):
            raise InsufficientStockError("Stock cannot be negative")

        logger.info(f"Stan produktu {product_id} zmieniony o {delta}")
        return self.get_product(product_id)
