# storefront/domain/settings.py
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ShopSettings:
    tax_rate: Decimal = Decimal("10.00")
    free_shipping_threshold: Decimal = Decimal("100.00")
    large_order_quantity_threshold: int = 10
    large_order_delivery_fee: Decimal = Decimal("50.00")
    pickup_address: str | None = None
    currency_symbol: str = "$"
    currency_code: str = "USD"


DEFAULT_SETTINGS = ShopSettings()
