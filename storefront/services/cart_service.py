# storefront/services/cart_service.py
from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import atomic
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import (
    InvalidZone,
    ItemNotFound,
    ProductUnavailable,
    ValidationError,
    ZoneRequired,
)
from storefront.domain.pricing import DELIVERY, DELIVERY_METHODS, LineItem, calculate_totals, money
from storefront.repos.cart_repo import CartRepo
from storefront.repos.location_repo import LocationRepo
from storefront.services.settings_service import SettingsService
from storefront.services.stock_ledger import StockLedger
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class CartService:
    """
    Koszyk uzytkownika (jeden na usera, tworzony leniwie).
    commands (add, update, remove, clear, delivery) - kazda w jednej transakcji
    ze zmiana stanu magazynu; query (get) tylko odczyt, bez blokad.

    Kolejnosc blokad: wiersz koszyka, produkty (rosnaco po id), pozycje koszyka.
    """

    def __init__(self, db: Session, settings_service: SettingsService | None = None):
        self.db = db
        self.repo = CartRepo(db)
        self.locations = LocationRepo(db)
        self.ledger = StockLedger(db)
        self.settings_service = settings_service or SettingsService(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        # pierwszy odczyt tworzy koszyk, dlatego tez w transakcji
        with atomic(self.db):
            cart = self.repo.get_or_create_cart(user_id)
            return self._cart_view(cart)

    def _zone_fee(self, cart: CartModel) -> Decimal:
        if cart.delivery_method != DELIVERY or not cart.delivery_zone_id:
            return Decimal("0")
        zone = self.locations.get_active_zone(cart.delivery_zone_id)
        return Decimal(zone.delivery_fee) if zone else Decimal("0")

    def _cart_view(self, cart: CartModel) -> Dict[str, Any]:
        lines = self.repo.get_cart_lines(cart.id)

        totals = calculate_totals(
            [
                LineItem(
                    unit_price=Decimal(product.price),
                    quantity=item.quantity,
                    requires_special_delivery=product.requires_special_delivery,
                )
                for item, product in lines
            ],
            cart.delivery_method,
            self._zone_fee(cart),
            self.settings_service.get_settings(),
        )

        #dict przeksztalcany w jsona
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "delivery_method": cart.delivery_method,
            "delivery_zone_id": cart.delivery_zone_id,
            "items": [
                {
                    "id": item.id,
                    "product_id": product.id,
                    "product_name": product.name,
                    "unit_price": Decimal(product.price),
                    "quantity": item.quantity,
                    "size": item.size,
                    "color": item.color,
                    "stock_quantity": product.stock_quantity,
                    "requires_special_delivery": product.requires_special_delivery,
                    "line_total": money(Decimal(product.price) * item.quantity),
                }
                for item, product in lines
            ],
            "item_count": len(lines),
            "totals": totals.as_dict(),
        }

    #commands
    def add_item(
        self,
        user_id: int,
        product_id: int,
        quantity: int,
        size: str | None = None,
        color: str | None = None,
    ) -> Dict[str, Any]:

        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1")

        size, color = _clean(size), _clean(color)

        with atomic(self.db):
            cart = self.repo.get_or_create_cart(user_id, lock=True)

            product = self.ledger.lock(product_id)
            if not product.is_active:
                raise ProductUnavailable(product_id)

            # rezerwujemy tylko dodawana ilosc, takze gdy pozycja juz jest w koszyku
            self.ledger.reserve(product_id, quantity)

            now = datetime.now(timezone.utc)
            existing_item = self.repo.find_item(cart.id, product_id, size, color)

            if existing_item:
                logger.info(
                    f"Produkt {product_id} juz jest w koszyku {cart.id}, zwiekszam ilosc "
                    f"z {existing_item.quantity} do {existing_item.quantity + quantity}"
                )
                existing_item.quantity += quantity
                existing_item.updated_at = now
            else:
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product_id,
                        quantity=quantity,
                        size=size,
                        color=color,
                    )
                )

            self.repo.touch(cart, now)
            self.repo.log_activity(
                user_id,
                f"Added {quantity} x {product.name} to cart",
                {"productId": product_id, "quantity": quantity, "size": size, "color": color},
            )

        logger.info(f"Produkt {product_id} x{quantity} dodany do koszyka uzytkownika {user_id}")
        return self.get_cart(user_id)

    def update_item_quantity(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1")

        with atomic(self.db):
            cart = self.repo.get_cart_by_user(user_id, lock=True)
            item = self.repo.get_item(cart.id, item_id) if cart else None
            if not item:
                raise ItemNotFound(item_id)

            product = self.ledger.lock(item.product_id)
            delta = quantity - item.quantity

            if delta > 0:
                self.ledger.reserve(item.product_id, delta)
            elif delta < 0:
                self.ledger.release(item.product_id, -delta)

            now = datetime.now(timezone.utc)
            item.quantity = quantity
            item.updated_at = now
            self.repo.touch(cart, now)
            self.repo.log_activity(
                user_id,
                f"Updated {product.name} quantity to {quantity} in cart",
                {"productId": item.product_id, "quantity": quantity, "quantityDifference": delta},
            )

        logger.info(f"Pozycja {item_id} koszyka uzytkownika {user_id}: ilosc {quantity} (delta {delta})")
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        with atomic(self.db):
            cart = self.repo.get_cart_by_user(user_id, lock=True)
            item = self.repo.get_item(cart.id, item_id) if cart else None
            if not item:
                raise ItemNotFound(item_id)

            product = self.ledger.lock(item.product_id)
            self.ledger.release(item.product_id, item.quantity)

            released = item.quantity
            self.repo.delete_cart_item(item)
            self.repo.touch(cart, datetime.now(timezone.utc))
            self.repo.log_activity(
                user_id,
                f"Removed {product.name} from cart",
                {"productId": product.id, "quantity": released},
            )

        logger.info(f"Pozycja {item_id} usunieta z koszyka uzytkownika {user_id}, zwolniono {released} szt.")
        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        with atomic(self.db):
            cart = self.repo.get_or_create_cart(user_id, lock=True)
            cleared = self._release_items(cart)
            self.repo.touch(cart, datetime.now(timezone.utc))
            self.repo.log_activity(user_id, "Cleared entire cart", {"itemsCleared": cleared})

        logger.info(f"Koszyk uzytkownika {user_id} wyczyszczony ({cleared} pozycji)")
        return self.get_cart(user_id)

    def set_delivery_method(self, user_id: int, method: str, zone_id: int | None = None) -> Dict[str, Any]:
        if method not in DELIVERY_METHODS:
            raise ValidationError(f"Unknown delivery method: {method}")
        if method == DELIVERY and zone_id is None:
            raise ZoneRequired()

        with atomic(self.db):
            cart = self.repo.get_or_create_cart(user_id, lock=True)

            if method == DELIVERY and not self.locations.get_active_zone(zone_id):
                raise InvalidZone(zone_id)

            cart.delivery_method = method
            cart.delivery_zone_id = zone_id if method == DELIVERY else None
            self.repo.touch(cart, datetime.now(timezone.utc))

        logger.info(f"Koszyk uzytkownika {user_id}: dostawa {method}, strefa {zone_id}")
        return self.get_cart(user_id)

    def release_abandoned_carts(self, older_than: timedelta) -> int:
        """
        Zwalnia stan magazynu z koszykow nieruszanych dluzej niz older_than.
        Kazdy koszyk w osobnej transakcji; zwraca liczbe oproznionych koszykow.
        """
        cutoff = datetime.now(timezone.utc) - older_than
        released = 0

        with atomic(self.db):
            stale_ids = [c.id for c in self.repo.find_stale_carts(cutoff)]

        for cart_id in stale_ids:
            with atomic(self.db):
                cart = self.repo.get_stale_cart(cart_id, cutoff)
                # koszyk mogl zostac zmieniony miedzy zapytaniami
                if not cart:
                    continue
                cleared = self._release_items(cart)
                self.repo.log_activity(
                    cart.user_id,
                    "Cart reservation expired",
                    {"itemsCleared": cleared},
                )
            if cleared:
                released += 1
                logger.info(f"Koszyk {cart_id} wygasl, zwolniono {cleared} pozycji")

        return released

    def _release_items(self, cart: CartModel) -> int:
        items = self.repo.get_cart_items(cart.id)

        for product_id in sorted({i.product_id for i in items}):
            self.ledger.lock(product_id)

        for item in items:
            self.ledger.release(item.product_id, item.quantity)

        self.repo.delete_cart_items(cart.id)
        return len(items)
