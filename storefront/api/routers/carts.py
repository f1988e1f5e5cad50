# storefront/api/routers/carts.py
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, http_error
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import CartOut, DeliveryIn, ItemIn, ItemQuantityIn
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Koszyk zalogowanego uzytkownika, tworzony przy pierwszym odczycie.
    """
    svc = get_service(db)
    try:
        return svc.get_cart(user["id"])
    except StorefrontError as e:
        raise http_error(e)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.add_item(
            user_id=user["id"],
            product_id=payload.product_id,
            quantity=payload.quantity,
            size=payload.size,
            color=payload.color,
        )
    except StorefrontError as e:
        raise http_error(e)


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: ItemQuantityIn,
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_item_quantity(user["id"], item_id, payload.quantity)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.remove_item(user["id"], item_id)
    except StorefrontError as e:
        raise http_error(e)


@router.delete("", response_model=CartOut)
def clear_cart(
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.clear_cart(user["id"])
    except StorefrontError as e:
        raise http_error(e)


@router.put("/delivery", response_model=CartOut)
def set_delivery(
    payload: DeliveryIn,
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.set_delivery_method(user["id"], payload.delivery_method, payload.delivery_zone_id)
    except StorefrontError as e:
        raise http_error(e)
