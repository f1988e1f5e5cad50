# storefront/services/order_service.py
import random
import time
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.database import atomic
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.checkout_session import CheckoutSessionModel
from storefront.data.models.location import CustomerAddressModel
from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import (
    CheckoutSessionNotFound,
    DeliveryMethodIncompatible,
    EmptyCart,
    InvalidAddress,
    InvalidPickupLocation,
    InvalidStatusTransition,
    OrderNotFound,
    OrderNumberCollision,
    ValidationError,
)
from storefront.domain.pricing import DELIVERY, DELIVERY_METHODS, PICKUP, LineItem, Totals, calculate_totals
from storefront.repos.cart_repo import CartRepo
from storefront.repos.location_repo import LocationRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.services.settings_service import SettingsService
from storefront.services.stock_ledger import StockLedger
from storefront.utils.logging import get_logger
from storefront.utils.retry import order_number_retry

logger = get_logger(__name__)

ONLINE = "online"
PAYMENT_METHODS = (ONLINE, "on_delivery", "on_pickup")
PAYMENT_STATUSES = ("pending", "paid", "failed")
ORDER_STATUSES = ("pending", "confirmed", "shipped", "delivered", "cancelled")

ALLOWED_TRANSITIONS = {
    "pending": ("confirmed", "cancelled"),
    "confirmed": ("shipped", "cancelled"),
    "shipped": ("delivered",),
    "delivered": (),
    "cancelled": (),
}

_STATUS_TIMESTAMPS = {
    "confirmed": "confirmed_at",
    "shipped": "shipped_at",
    "delivered": "delivered_at",
    "cancelled": "cancelled_at",
}

MAX_NOTES_LENGTH = 500


def generate_order_number() -> str:
    # ORD-<ostatnie 6 cyfr timestampu ms>-<3 cyfry losowe>, nie jest unikalny - patrz _insert_order
    timestamp = str(int(time.time() * 1000))
    return f"ORD-{timestamp[-6:]}-{random.randint(0, 999):03d}"


def _totals_fields(totals: Totals) -> Dict[str, Decimal]:
    return {
        "subtotal": totals.subtotal,
        "tax_amount": totals.tax,
        "shipping_fee": totals.shipping,
        "large_order_fee": totals.large_order_fee,
        "special_delivery_fee": totals.special_delivery_fee,
        "total_amount": totals.total,
    }


def _address_snapshot(address: CustomerAddressModel) -> Dict[str, Any]:
    return {
        "id": address.id,
        "region_name": address.region_name,
        "city_name": address.city_name,
        "area_name": address.area_name,
        "landmark": address.landmark,
        "additional_instructions": address.additional_instructions,
        "contact_phone": address.contact_phone,
    }


class OrderService:
    """
    Domena zamowien, oddzielona od CartService.
    Stan magazynu zostal zmniejszony juz przy dodaniu do koszyka,
    wiec zlozenie zamowienia nie wola StockLedger - odpina tylko pozycje od koszyka.
    """

    def __init__(
        self,
        db: Session,
        settings_service: SettingsService | None = None,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.locations = LocationRepo(db)
        self.ledger = StockLedger(db)
        self.settings_service = settings_service or SettingsService(db)
        self.notification_service = notification_service or NotificationService()

    def create_order(
        self,
        user_id: int,
        payment_method: str,
        delivery_method: str,
        delivery_address_id: int | None = None,
        pickup_location_id: int | None = None,
        customer_notes: str | None = None,
    ) -> Dict[str, Any]:
        """
        Use Case: zamowienie z koszyka.

        1. Blokuje koszyk, pusty -> EmptyCart
        2. Sprawdza czy produkty mozna dostarczyc / odebrac
        3. Waliduje adres lub punkt odbioru
        4. Liczy sumy
        5. online -> CheckoutSession (bez zmian w koszyku i magazynie),
           w innym przypadku Order + OrderItem, koszyk usuwany
        """
        self._validate_request(payment_method, delivery_method, delivery_address_id, pickup_location_id, customer_notes)

        with atomic(self.db):
            cart = self.carts.get_cart_by_user(user_id, lock=True)
            lines = self.carts.get_cart_lines(cart.id) if cart else []
            if not lines:
                raise EmptyCart()

            self._check_eligibility(delivery_method, lines)

            delivery_address = None
            if delivery_method == DELIVERY:
                address = self.locations.get_customer_address(delivery_address_id, user_id)
                if not address:
                    raise InvalidAddress(delivery_address_id)
                delivery_address = _address_snapshot(address)
            elif not self.locations.get_active_pickup_location(pickup_location_id):
                raise InvalidPickupLocation(pickup_location_id)

            zone_id = cart.delivery_zone_id if delivery_method == DELIVERY else None
            totals = calculate_totals(
                [
                    LineItem(Decimal(product.price), item.quantity, product.requires_special_delivery)
                    for item, product in lines
                ],
                delivery_method,
                self._zone_fee(zone_id),
                self.settings_service.get_settings(),
            )

            if payment_method == ONLINE:
                session = self.repo.create_checkout_session(
                    CheckoutSessionModel(
                        user_id=user_id,
                        delivery_method=delivery_method,
                        delivery_zone_id=zone_id,
                        delivery_address_id=delivery_address_id if delivery_method == DELIVERY else None,
                        pickup_location_id=pickup_location_id if delivery_method == PICKUP else None,
                        customer_notes=customer_notes,
                        status="pending",
                        **_totals_fields(totals),
                    )
                )
                result = {"kind": "checkout_session", "checkout_session": self._session_view(session)}
            else:
                order = self._insert_order(
                    user_id=user_id,
                    payment_method=payment_method,
                    payment_status="pending",
                    status="pending",
                    delivery_method=delivery_method,
                    delivery_zone_id=zone_id,
                    delivery_address_id=delivery_address_id if delivery_method == DELIVERY else None,
                    delivery_address=delivery_address,
                    pickup_location_id=pickup_location_id if delivery_method == PICKUP else None,
                    customer_notes=customer_notes,
                    **_totals_fields(totals),
                )

                order_items = []
                for item, product in lines:
                    # cena z momentu zamowienia
                    unit_price = Decimal(product.price)
                    order_items.append(
                        self.repo.add_order_item(
                            OrderItemModel(
                                order_id=order.id,
                                product_id=product.id,
                                product_name=product.name,
                                product_description=product.description,
                                product_image_url=product.image_url,
                                size=item.size,
                                color=item.color,
                                quantity=item.quantity,
                                unit_price=unit_price,
                                subtotal=unit_price * item.quantity,
                                requires_special_delivery=product.requires_special_delivery,
                            )
                        )
                    )

                self.carts.delete_cart(cart)
                result = {"kind": "order", "order": self._order_view(order, order_items)}

        if result["kind"] == "order":
            order_data = result["order"]
            logger.info(f"Order {order_data['order_number']} created for user {user_id}")
            self.notification_service.send_order_notification(user_id, order_data["id"], order_data["order_number"])
        else:
            session_data = result["checkout_session"]
            logger.info(f"Checkout session {session_data['id']} created for user {user_id}")
            self.notification_service.send_checkout_session_notification(user_id, session_data["id"])

        return result

    @order_number_retry()
    def _insert_order(self, **fields) -> OrderModel:
        order = OrderModel(order_number=generate_order_number(), **fields)
        try:
            # savepoint - kolizja numeru nie psuje calej transakcji
            with self.db.begin_nested():
                self.repo.add_order(order)
        except IntegrityError as e:
            if "order_number" not in str(e.orig):
                raise
            logger.warning(f"Order number {order.order_number} already taken, generating a new one")
            raise OrderNumberCollision("Order number collision") from e
        return order

    def _validate_request(
        self,
        payment_method: str,
        delivery_method: str,
        delivery_address_id: int | None,
        pickup_location_id: int | None,
        customer_notes: str | None,
    ):
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(f"Unknown payment method: {payment_method}")
        if delivery_method not in DELIVERY_METHODS:
            raise ValidationError(f"Unknown delivery method: {delivery_method}")
        if delivery_method == DELIVERY and not delivery_address_id:
            raise ValidationError("Delivery address is required for delivery orders")
        if delivery_method == PICKUP and not pickup_location_id:
            raise ValidationError("Pickup location is required for pickup orders")
        if customer_notes and len(customer_notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"Customer notes cannot exceed {MAX_NOTES_LENGTH} characters")

    def _check_eligibility(self, delivery_method: str, lines: List[Tuple[CartItemModel, ProductModel]]):
        if delivery_method == DELIVERY:
            offending = [p for _, p in lines if not p.delivery_eligible]
        else:
            offending = [p for _, p in lines if not p.pickup_eligible]

        if offending:
            items = [
                {
                    "product_id": p.id,
                    "product_name": p.name,
                    "message": f"This item is not available for {delivery_method}",
                }
                for p in offending
            ]
            logger.warning(f"Delivery method {delivery_method} rejected for products {[p.id for p in offending]}")
            raise DeliveryMethodIncompatible(delivery_method, items)

    def _zone_fee(self, zone_id: int | None) -> Decimal:
        if not zone_id:
            return Decimal("0")
        zone = self.locations.get_active_zone(zone_id)
        return Decimal(zone.delivery_fee) if zone else Decimal("0")

    def get_order(self, user_id: int, order_id: int) -> Dict[str, Any]:
        """
        Use Case: pobranie zamowienia (Query). Cudze zamowienie = brak zamowienia.
        """
        with atomic(self.db):
            order = self.repo.get_order(order_id)
            if not order or order.user_id != user_id:
                raise OrderNotFound(order_id)
            return self._order_view(order)

    def list_orders(self, user_id: int, status: str | None = None, page: int = 1, limit: int = 10) -> List[Dict[str, Any]]:
        if status is not None and status not in ORDER_STATUSES:
            raise ValidationError(f"Unknown order status: {status}")
        if page < 1 or not 1 <= limit <= 100:
            raise ValidationError("page must be >= 1 and limit between 1 and 100")

        with atomic(self.db):
            orders = self.repo.list_orders(user_id, status, limit=limit, offset=(page - 1) * limit)
            return [self._order_view(o) for o in orders]

    def get_checkout_session(self, user_id: int, session_id: int) -> Dict[str, Any]:
        with atomic(self.db):
            session = self.repo.get_checkout_session(session_id)
            if not session or session.user_id != user_id:
                raise CheckoutSessionNotFound(session_id)
            return self._session_view(session)

    def update_order_status(self, order_id: int, status: str) -> Dict[str, Any]:
        """
        Use Case: zmiana statusu (admin).
        Anulowanie zwraca pozycje zamowienia do magazynu w tej samej transakcji.
        """
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Unknown order status: {status}")

        with atomic(self.db):
            order = self.repo.get_order(order_id, lock=True)
            if not order:
                raise OrderNotFound(order_id)

            previous = order.status
            if status != previous:
                if status not in ALLOWED_TRANSITIONS[previous]:
                    raise InvalidStatusTransition(previous, status)

                now = datetime.now(timezone.utc)
                if status == "cancelled":
                    self._restock(order)

                setattr(order, _STATUS_TIMESTAMPS[status], now)
                order.status = status
                order.updated_at = now

            view = self._order_view(order)

        logger.info(f"Order {order_id} status {previous} -> {status}")
        return view

    def update_payment_status(self, order_id: int, payment_status: str) -> Dict[str, Any]:
        if payment_status not in PAYMENT_STATUSES:
            raise ValidationError(f"Unknown payment status: {payment_status}")

        with atomic(self.db):
            order = self.repo.get_order(order_id, lock=True)
            if not order:
                raise OrderNotFound(order_id)
            order.payment_status = payment_status
            order.updated_at = datetime.now(timezone.utc)
            view = self._order_view(order)

        logger.info(f"Order {order_id} payment status -> {payment_status}")
        return view

    def _restock(self, order: OrderModel):
        lines = [i for i in order.items if i.product_id is not None]

        for product_id in sorted({i.product_id for i in lines}):
            self.ledger.lock(product_id)

        for item in lines:
            self.ledger.release(item.product_id, item.quantity)

    def _order_view(self, order: OrderModel, items: List[OrderItemModel] | None = None) -> Dict[str, Any]:
        items = order.items if items is None else items
        return {
            "id": order.id,
            "order_number": order.order_number,
            "user_id": order.user_id,
            "status": order.status,
            "payment_method": order.payment_method,
            "payment_status": order.payment_status,
            "delivery_method": order.delivery_method,
            "delivery_zone_id": order.delivery_zone_id,
            "delivery_address": order.delivery_address,
            "pickup_location_id": order.pickup_location_id,
            "totals": {
                "subtotal": order.subtotal,
                "tax_amount": order.tax_amount,
                "shipping_fee": order.shipping_fee,
                "large_order_fee": order.large_order_fee,
                "special_delivery_fee": order.special_delivery_fee,
                "total_amount": order.total_amount,
            },
            "customer_notes": order.customer_notes,
            "items": [
                {
                    "id": i.id,
                    "product_id": i.product_id,
                    "product_name": i.product_name,
                    "size": i.size,
                    "color": i.color,
                    "quantity": i.quantity,
                    "unit_price": i.unit_price,
                    "subtotal": i.subtotal,
                    "requires_special_delivery": i.requires_special_delivery,
                }
                for i in items
            ],
            "created_at": order.created_at,
            "confirmed_at": order.confirmed_at,
            "shipped_at": order.shipped_at,
            "delivered_at": order.delivered_at,
            "cancelled_at": order.cancelled_at,
        }

    def _session_view(self, session: CheckoutSessionModel) -> Dict[str, Any]:
        return {
            "id": session.id,
            "user_id": session.user_id,
            "status": session.status,
            "delivery_method": session.delivery_method,
            "delivery_zone_id": session.delivery_zone_id,
            "delivery_address_id": session.delivery_address_id,
            "pickup_location_id": session.pickup_location_id,
            "totals": {
                "subtotal": session.subtotal,
                "tax_amount": session.tax_amount,
                "shipping_fee": session.shipping_fee,
                "large_order_fee": session.large_order_fee,
                "special_delivery_fee": session.special_delivery_fee,
                "total_amount": session.total_amount,
            },
            "created_at": session.created_at,
        }
