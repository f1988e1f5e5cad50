# storefront/domain/errors.py
from typing import Any, Dict, List


class StorefrontError(Exception):
    """Bazowy blad domeny. status_code to odpowiednik HTTP dla routerow."""

    status_code = 400

    def __init__(self, message: str, **extra: Any):
        super().__init__(message)
        self.message = message
        self.extra = extra

    @property
    def detail(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, "message": self.message, **self.extra}


class ValidationError(StorefrontError):
    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    status_code = 409


class StorageError(StorefrontError):
    status_code = 500


# --- validation ---

class ZoneRequired(ValidationError):
    def __init__(self):
        super().__init__("Delivery zone is required for delivery")


class EmptyCart(ValidationError):
    def __init__(self):
        super().__init__("Cart is empty")


# --- not found ---

class ProductNotFound(NotFoundError):
    def __init__(self, product_id: int):
        super().__init__("Product not found", product_id=product_id)


class ItemNotFound(NotFoundError):
    def __init__(self, item_id: int):
        super().__init__("Cart item not found", item_id=item_id)


class InvalidZone(NotFoundError):
    def __init__(self, zone_id: int):
        super().__init__("Delivery zone not found or inactive", zone_id=zone_id)


class InvalidAddress(NotFoundError):
    def __init__(self, address_id: int):
        super().__init__("Delivery address not found", address_id=address_id)


class InvalidPickupLocation(NotFoundError):
    def __init__(self, pickup_location_id: int):
        super().__init__("Pickup location not found or inactive", pickup_location_id=pickup_location_id)


class OrderNotFound(NotFoundError):
    def __init__(self, order_id: int):
        super().__init__("Order not found", order_id=order_id)


class CheckoutSessionNotFound(NotFoundError):
    def __init__(self, session_id: int):
        super().__init__("Checkout session not found", session_id=session_id)


# --- conflicts ---

class InsufficientStock(ConflictError):
    def __init__(self, product_id: int, available: int):
        super().__init__(
            f"Only {available} items available in stock",
            product_id=product_id,
            available=available,
        )
        self.available = available


class ProductUnavailable(ConflictError):
    def __init__(self, product_id: int):
        super().__init__("Product is not available", product_id=product_id)


class DeliveryMethodIncompatible(ConflictError):
    def __init__(self, delivery_method: str, items: List[Dict[str, Any]]):
        super().__init__(
            f"Some items in your cart are not available for {delivery_method}",
            delivery_method=delivery_method,
            items=items,
        )
        self.items = items


class InvalidStatusTransition(ConflictError):
    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change order status from {current} to {requested}",
            current=current,
            requested=requested,
        )


class OrderNumberCollision(StorefrontError):
    """Kolizja order_number - obslugiwana przez retry, nie wychodzi poza serwis."""

    status_code = 500
