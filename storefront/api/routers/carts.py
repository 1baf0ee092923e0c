#storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import (
    NotFoundError,
    ValidationError,
    InsufficientStockError,
    EmptyCartError,
    ConflictError,
)
from storefront.domain.schemas import (
    ItemIn,
    ItemUpdate,
    CartOut,
    CheckoutResponse,
)
from storefront.services.cart_service import CartService
from storefront.services.notification_service import NotificationService

# brak auth - user_id w query zastepuje zalogowanego usera
router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(
        db=db,
        notification_service=NotificationService(),
    )


def to_http(e: Exception) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail={"message": "Validation failed", "errors": e.errors})
    if isinstance(e, ConflictError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, PermissionError):
        return HTTPException(status_code=403, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=CartOut)
def get_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_user_cart(user_id)
    except NotFoundError as e:
        raise to_http(e)


@router.get("/history", response_model=List[CartOut])
def get_history(user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_history(user_id)
    except NotFoundError as e:
        raise to_http(e)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(
            user_id=user_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
        )
    except (NotFoundError, ValidationError, InsufficientStockError, ConflictError) as e:
        raise to_http(e)


@router.put("/items/{product_id}", response_model=CartOut)
def update_item(
    product_id: int,
    payload: ItemUpdate,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item(user_id, product_id, payload.quantity)
    except (NotFoundError, InsufficientStockError, ConflictError) as e:
        raise to_http(e)


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user_id, product_id)
    except (NotFoundError, ConflictError) as e:
        raise to_http(e)


@router.delete("", response_model=CartOut)
def clear_cart(user_id: int = Query(...), db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.clear_cart(user_id)
    except (NotFoundError, ConflictError) as e:
        raise to_http(e)


@router.post("/checkout", response_model=CheckoutResponse, response_model_by_alias=True)
def checkout(
    response: Response,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    """
    200 - wszystkie pozycje sprzedane, koszyk completed
    207 - czesc pozycji sprzedana, reszta zostaje w koszyku
    400 - nic nie sprzedane albo pusty koszyk
    """
    svc = get_service(db)
    try:
        result = svc.checkout(user_id)
    except EmptyCartError as e:
        response.status_code = 400
        return {"success": False, "message": str(e), "result": None}
    except (NotFoundError, ConflictError) as e:
        raise to_http(e)

    if not result["failed_items"]:
        return {"success": True, "message": "Checkout successful", "result": result}

    if not result["success_items"]:
        response.status_code = 400
        return {
            "success": False,
            "message": "Checkout failed - all items could not be processed",
            "result": result,
        }

    response.status_code = 207
    return {
        "success": True,
        "message": "Partial checkout - some items could not be processed",
        "result": result,
    }
