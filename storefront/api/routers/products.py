# storefront/api/routers/products.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import NotFoundError, ValidationError, InsufficientStockError
from storefront.domain.schemas import (
    ProductIn,
    ProductUpdate,
    ProductOut,
    ProductPage,
    StockAdjustIn,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return ProductService(db)


def validation_error(e: ValidationError):
    return HTTPException(status_code=400, detail={"message": "Validation failed", "errors": e.errors})


# statyczne sciezki przed /{product_id}, inaczej FastAPI probuje parsowac "featured" jako int

@router.get("/", response_model=ProductPage)
def list_products(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_products(page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
    except ValidationError as e:
        raise validation_error(e)


@router.get("/featured", response_model=ProductPage)
def list_featured(
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_featured(page=page, limit=limit)
    except ValidationError as e:
        raise validation_error(e)


@router.get("/search", response_model=ProductPage)
def search_products(
    q: str = Query(""),
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.search(q, page=page, limit=limit)
    except ValidationError as e:
        raise validation_error(e)


@router.get("/category/{category}", response_model=ProductPage)
def list_by_category(
    category: str,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_products(
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
            category=category,
        )
    except ValidationError as e:
        raise validation_error(e)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.create_product(payload.model_dump())
    except ValidationError as e:
        raise validation_error(e)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_product(product_id, payload.model_dump(exclude_unset=True, exclude_none=True))
    except ValidationError as e:
        raise validation_error(e)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.delete_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "message": "Product deleted"}


@router.patch("/{product_id}/stock", response_model=ProductOut)
def adjust_stock(product_id: int, payload: StockAdjustIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.adjust_stock(product_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientStockError as e:
        raise HTTPException(status_code=400, detail=str(e))
