# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, init_db
from storefront.data.models import (
    AppSettingsModel,
    DeliveryZoneModel,
    PickupLocationModel,
    ProductModel,
    UserModel,
)
from storefront.domain.settings import DEFAULT_SETTINGS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def seed():
    init_db()
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            logger.info("Database already seeded, skipping")
            return

        d = DEFAULT_SETTINGS
        db.add(
            AppSettingsModel(
                id=1,
                tax_rate=d.tax_rate,
                free_shipping_threshold=d.free_shipping_threshold,
                large_order_quantity_threshold=d.large_order_quantity_threshold,
                large_order_delivery_fee=d.large_order_delivery_fee,
                currency_symbol=d.currency_symbol,
                currency_code=d.currency_code,
            )
        )
        db.add_all(
            [
                UserModel(name="Admin", email="admin@example.com", role="admin"),
                UserModel(name="Customer", email="customer@example.com"),
                DeliveryZoneModel(name="City centre", delivery_fee=Decimal("15.00"), estimated_days="1-2"),
                DeliveryZoneModel(name="Suburbs", delivery_fee=Decimal("25.00"), estimated_days="2-4"),
                PickupLocationModel(name="Main store", area_name="Centre", contact_phone="+1 555 0100"),
                ProductModel(name="T-shirt", price=Decimal("20.00"), stock_quantity=100),
                ProductModel(name="Hoodie", price=Decimal("45.00"), stock_quantity=40),
                ProductModel(
                    name="Sofa",
                    price=Decimal("499.00"),
                    stock_quantity=5,
                    requires_special_delivery=True,
                    pickup_eligible=False,
                ),
                ProductModel(name="Gift card", price=Decimal("25.00"), stock_quantity=1000, delivery_eligible=False),
            ]
        )
        db.commit()
        logger.info("Seed data created")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
