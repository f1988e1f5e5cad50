# storefront/api/routers/orders.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, http_error, require_admin
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CheckoutSessionOut,
    OrderCreate,
    OrderCreatedOut,
    OrderOut,
    OrderStatus,
    OrderStatusIn,
    PaymentStatusIn,
)
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=OrderCreatedOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Tworzy zamowienie z koszyka (platnosc przy dostawie/odbiorze)
    albo sesje checkout dla platnosci online.
    Wysyla powiadomienie asynchronicznie.
    """
    svc = get_service(db)
    try:
        return svc.create_order(
            user_id=user["id"],
            payment_method=payload.payment_method,
            delivery_method=payload.delivery_method,
            delivery_address_id=payload.delivery_address_id,
            pickup_location_id=payload.pickup_location_id,
            customer_notes=payload.customer_notes,
        )
    except StorefrontError as e:
        raise http_error(e)


@router.get("", response_model=List[OrderOut])
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.list_orders(user["id"], status=status, page=page, limit=limit)
    except StorefrontError as e:
        raise http_error(e)


@router.get("/checkout-sessions/{session_id}", response_model=CheckoutSessionOut)
def get_checkout_session(
    session_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.get_checkout_session(user["id"], session_id)
    except StorefrontError as e:
        raise http_error(e)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: Dict[str, Any] = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegoly zamowienia.
    """
    svc = get_service(db)
    try:
        return svc.get_order(user["id"], order_id)
    except StorefrontError as e:
        raise http_error(e)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    admin: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_order_status(order_id, payload.status)
    except StorefrontError as e:
        raise http_error(e)


@router.patch("/{order_id}/payment-status", response_model=OrderOut)
def update_payment_status(
    order_id: int,
    payload: PaymentStatusIn,
    admin: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.update_payment_status(order_id, payload.payment_status)
    except StorefrontError as e:
        raise http_error(e)
