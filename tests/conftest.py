# tests/conftest.py
import os
import tempfile

# konfiguracja musi byc ustawiona przed importem storefront.*
_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'storefront.db')}"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"
os.environ["CART_RESERVATION_TTL_SECONDS"] = "0"

from decimal import Decimal

import pytest

import storefront.data.models  # noqa: F401
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import (
    AppSettingsModel,
    CartModel,
    CustomerAddressModel,
    DeliveryZoneModel,
    PickupLocationModel,
    ProductModel,
    UserModel,
)


class Factory:
    """Zapisuje dane testowe w osobnej, od razu zamknietej sesji."""

    def _save(self, obj):
        s = SessionLocal()
        try:
            s.add(obj)
            s.commit()
            return obj.id
        finally:
            s.close()

    def user(self, name="Customer", role="customer") -> int:
        return self._save(UserModel(name=name, role=role))

    def product(self, price="20.00", stock=10, **kwargs) -> int:
        return self._save(
            ProductModel(
                name=kwargs.pop("name", "Product"),
                price=Decimal(price),
                stock_quantity=stock,
                **kwargs,
            )
        )

    def zone(self, fee="15.00", is_active=True) -> int:
        return self._save(DeliveryZoneModel(name="Zone", delivery_fee=Decimal(fee), is_active=is_active))

    def pickup_location(self, is_active=True) -> int:
        return self._save(PickupLocationModel(name="Store", area_name="Centre", is_active=is_active))

    def address(self, user_id: int) -> int:
        return self._save(
            CustomerAddressModel(
                customer_id=user_id,
                region_name="Region",
                city_name="City",
                area_name="Area",
                landmark="Near the park",
                contact_phone="+1 555 0100",
            )
        )

    def settings(self, **kwargs) -> int:
        return self._save(AppSettingsModel(id=1, **kwargs))


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make():
    return Factory()


@pytest.fixture
def stock_of():
    def _stock_of(product_id: int) -> int:
        s = SessionLocal()
        try:
            return s.get(ProductModel, product_id).stock_quantity
        finally:
            s.close()

    return _stock_of


@pytest.fixture
def cart_row():
    def _cart_row(user_id: int):
        s = SessionLocal()
        try:
            cart = s.query(CartModel).filter(CartModel.user_id == user_id).first()
            if cart:
                s.expunge(cart)
            return cart
        finally:
            s.close()

    return _cart_row
