# storefront/domain/pricing.py
"""
Liczenie sum koszyka / zamowienia. Czysta funkcja, bez I/O.

Ta sama regula jest uzywana w podgladzie koszyka i przy tworzeniu zamowienia:
oplata za duze zamowienie / dostawe specjalna zastepuje oplate strefy,
a prog darmowej dostawy zawsze ja zeruje. large_order_fee i
special_delivery_fee to tylko rozbicie pola shipping, nie sa doliczane.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from storefront.domain.settings import ShopSettings

DELIVERY = "delivery"
PICKUP = "pickup"
DELIVERY_METHODS = (PICKUP, DELIVERY)

_CENT = Decimal("0.01")
_ZERO = Decimal("0")


@dataclass(frozen=True)
class LineItem:
    unit_price: Decimal
    quantity: int
    requires_special_delivery: bool = False


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    large_order_fee: Decimal
    special_delivery_fee: Decimal
    total: Decimal

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "tax": self.tax,
            "shipping": self.shipping,
            "large_order_fee": self.large_order_fee,
            "special_delivery_fee": self.special_delivery_fee,
            "total": self.total,
        }


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def calculate_totals(
    items: Iterable[LineItem],
    delivery_method: str,
    zone_fee: Decimal | None,
    settings: ShopSettings,
) -> Totals:
    items = list(items)
    if not items:
        zero = money(_ZERO)
        return Totals(zero, zero, zero, zero, zero, zero)

    subtotal = sum((Decimal(i.unit_price) * i.quantity for i in items), _ZERO)
    total_quantity = sum(i.quantity for i in items)
    tax = subtotal * Decimal(settings.tax_rate) / Decimal(100)

    shipping = _ZERO
    large_order_fee = _ZERO
    special_delivery_fee = _ZERO

    if delivery_method == DELIVERY:
        is_large = total_quantity >= settings.large_order_quantity_threshold
        has_special = any(i.requires_special_delivery for i in items)

        if is_large or has_special:
            shipping = Decimal(settings.large_order_delivery_fee)
        else:
            shipping = Decimal(zone_fee or _ZERO)

        if subtotal >= Decimal(settings.free_shipping_threshold):
            shipping = _ZERO
        elif is_large:
            large_order_fee = shipping
        elif has_special:
            special_delivery_fee = shipping

    return Totals(
        subtotal=money(subtotal),
        tax=money(tax),
        shipping=money(shipping),
        large_order_fee=money(large_order_fee),
        special_delivery_fee=money(special_delivery_fee),
        total=money(subtotal + tax + shipping),
    )
