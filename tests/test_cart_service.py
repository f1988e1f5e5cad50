# tests/test_cart_service.py
import threading
import warnings
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import update
from sqlalchemy.exc import SAWarning

from storefront.data.database import SessionLocal
from storefront.data.models import CartModel, CustomerActivityModel
from storefront.domain.errors import (
    InsufficientStock,
    InvalidZone,
    ItemNotFound,
    ProductNotFound,
    ProductUnavailable,
    StorefrontError,
    ValidationError,
    ZoneRequired,
)
from storefront.services.cart_service import CartService


@pytest.fixture
def user(make):
    return make.user()


def test_get_cart_creates_empty_cart(db, user):
    cart = CartService(db).get_cart(user)

    assert cart["user_id"] == user
    assert cart["items"] == []
    assert cart["item_count"] == 0
    assert cart["delivery_method"] == "delivery"
    assert cart["totals"]["total"] == Decimal("0.00")

    # drugi odczyt nie tworzy nowego koszyka
    assert CartService(db).get_cart(user)["cart_id"] == cart["cart_id"]


def test_add_item_reserves_stock(db, make, user, stock_of):
    pid = make.product(price="20.00", stock=10, name="T-shirt")

    cart = CartService(db).add_item(user, pid, 3, size="M", color="Black")

    assert stock_of(pid) == 7
    assert cart["item_count"] == 1
    line = cart["items"][0]
    assert line["product_name"] == "T-shirt"
    assert line["quantity"] == 3
    assert line["size"] == "M"
    assert line["stock_quantity"] == 7
    assert line["line_total"] == Decimal("60.00")
    assert cart["totals"]["subtotal"] == Decimal("60.00")
    assert cart["totals"]["tax"] == Decimal("6.00")


def test_add_same_variant_merges_line(db, make, user, stock_of):
    pid = make.product(stock=10)
    svc = CartService(db)

    svc.add_item(user, pid, 2, size=" M ")
    cart = svc.add_item(user, pid, 3, size="M")

    assert cart["item_count"] == 1
    assert cart["items"][0]["quantity"] == 5
    assert stock_of(pid) == 5


def test_different_variants_are_separate_lines(db, make, user, stock_of):
    pid = make.product(stock=10)
    svc = CartService(db)

    svc.add_item(user, pid, 1, size="M")
    svc.add_item(user, pid, 1, size="L")
    cart = svc.add_item(user, pid, 1)

    assert cart["item_count"] == 3
    assert stock_of(pid) == 7


def test_add_more_than_available(db, make, user, stock_of):
    pid = make.product(stock=2)

    with pytest.raises(InsufficientStock) as exc:
        CartService(db).add_item(user, pid, 3)

    assert exc.value.available == 2
    assert stock_of(pid) == 2
    assert CartService(db).get_cart(user)["items"] == []


def test_add_inactive_or_missing_product(db, make, user, stock_of):
    inactive = make.product(stock=5, is_active=False)

    with pytest.raises(ProductUnavailable):
        CartService(db).add_item(user, inactive, 1)
    assert stock_of(inactive) == 5

    with pytest.raises(ProductNotFound):
        CartService(db).add_item(user, 12345, 1)


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_requires_positive_quantity(db, make, user, quantity):
    pid = make.product(stock=5)

    with pytest.raises(ValidationError):
        CartService(db).add_item(user, pid, quantity)


def test_update_quantity_adjusts_by_delta(db, make, user, stock_of):
    pid = make.product(stock=10)
    svc = CartService(db)
    item_id = svc.add_item(user, pid, 2)["items"][0]["id"]

    cart = svc.update_item_quantity(user, item_id, 6)
    assert cart["items"][0]["quantity"] == 6
    assert stock_of(pid) == 4

    cart = svc.update_item_quantity(user, item_id, 1)
    assert cart["items"][0]["quantity"] == 1
    assert stock_of(pid) == 9


def test_update_quantity_beyond_stock_keeps_line(db, make, user, stock_of):
    pid = make.product(stock=5)
    svc = CartService(db)
    item_id = svc.add_item(user, pid, 2)["items"][0]["id"]

    with pytest.raises(InsufficientStock) as exc:
        svc.update_item_quantity(user, item_id, 10)

    assert exc.value.available == 3
    assert svc.get_cart(user)["items"][0]["quantity"] == 2
    assert stock_of(pid) == 3


def test_update_item_of_other_user(db, make, user):
    other = make.user(name="Other")
    pid = make.product(stock=5)
    svc = CartService(db)
    item_id = svc.add_item(other, pid, 1)["items"][0]["id"]

    with pytest.raises(ItemNotFound):
        svc.update_item_quantity(user, item_id, 2)
    with pytest.raises(ItemNotFound):
        svc.remove_item(user, item_id)


def test_remove_item_releases_stock_once(db, make, user, stock_of):
    pid = make.product(stock=10)
    svc = CartService(db)
    item_id = svc.add_item(user, pid, 4)["items"][0]["id"]

    cart = svc.remove_item(user, item_id)
    assert cart["items"] == []
    assert stock_of(pid) == 10

    with pytest.raises(ItemNotFound):
        svc.remove_item(user, item_id)
    assert stock_of(pid) == 10


def test_reserve_release_conservation(db, make, user, stock_of):
    a = make.product(stock=10)
    b = make.product(stock=8)
    svc = CartService(db)

    svc.add_item(user, a, 3)
    cart = svc.add_item(user, b, 5)
    item_b = next(i["id"] for i in cart["items"] if i["product_id"] == b)
    svc.update_item_quantity(user, item_b, 2)

    in_cart = {i["product_id"]: i["quantity"] for i in svc.get_cart(user)["items"]}
    assert stock_of(a) + in_cart[a] == 10
    assert stock_of(b) + in_cart[b] == 8


def test_clear_cart_releases_everything(db, make, user, stock_of):
    a = make.product(stock=10)
    b = make.product(stock=10)
    svc = CartService(db)
    cart_id = svc.add_item(user, a, 3)["cart_id"]
    svc.add_item(user, b, 2)

    cart = svc.clear_cart(user)

    assert cart["cart_id"] == cart_id
    assert cart["items"] == []
    assert stock_of(a) == 10
    assert stock_of(b) == 10


def test_concurrent_adds_cannot_oversell(make, stock_of):
    pid = make.product(stock=10)
    buyers = [make.user(name="A"), make.user(name="B")]
    barrier = threading.Barrier(len(buyers))
    outcomes = []

    def buy(user_id):
        s = SessionLocal()
        try:
            barrier.wait()
            CartService(s).add_item(user_id, pid, 6)
            outcomes.append(("ok", None))
        except StorefrontError as e:
            outcomes.append((type(e).__name__, e.detail.get("available")))
        finally:
            s.close()

    threads = [threading.Thread(target=buy, args=(u,)) for u in buyers]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    # przegrany dostaje InsufficientStock, nie "database is locked"
    assert sorted(outcomes, key=lambda o: o[0]) == [("InsufficientStock", 4), ("ok", None)]
    assert stock_of(pid) == 4


def test_failed_add_leaves_no_stale_cart_in_session(db, make, user):
    pid = make.product(stock=2)
    svc = CartService(db)

    with warnings.catch_warnings():
        warnings.simplefilter("error", SAWarning)
        with pytest.raises(InsufficientStock):
            svc.add_item(user, pid, 3)
        assert len(db.identity_map) == 0

        cart = svc.get_cart(user)

    assert cart["items"] == []


def test_set_delivery_method(db, make, user):
    zone = make.zone(fee="15.00")
    pid = make.product(price="20.00", stock=10)
    svc = CartService(db)
    svc.add_item(user, pid, 3)

    cart = svc.set_delivery_method(user, "delivery", zone)
    assert cart["delivery_zone_id"] == zone
    assert cart["totals"]["shipping"] == Decimal("15.00")
    assert cart["totals"]["total"] == Decimal("81.00")

    cart = svc.set_delivery_method(user, "pickup", zone)
    assert cart["delivery_method"] == "pickup"
    assert cart["delivery_zone_id"] is None
    assert cart["totals"]["shipping"] == Decimal("0.00")


def test_set_delivery_requires_active_zone(db, make, user):
    inactive = make.zone(is_active=False)
    svc = CartService(db)

    with pytest.raises(ZoneRequired):
        svc.set_delivery_method(user, "delivery")
    with pytest.raises(InvalidZone):
        svc.set_delivery_method(user, "delivery", inactive)
    with pytest.raises(InvalidZone):
        svc.set_delivery_method(user, "delivery", 999)
    with pytest.raises(ValidationError):
        svc.set_delivery_method(user, "drone")


def test_mutations_log_activity(db, make, user):
    pid = make.product(stock=10)
    svc = CartService(db)
    item_id = svc.add_item(user, pid, 2)["items"][0]["id"]
    svc.update_item_quantity(user, item_id, 3)
    svc.remove_item(user, item_id)

    s = SessionLocal()
    try:
        rows = (
            s.query(CustomerActivityModel)
            .filter(CustomerActivityModel.customer_id == user)
            .order_by(CustomerActivityModel.id)
            .all()
        )
        assert [r.type for r in rows] == ["purchase"] * 3
        assert rows[0].details["quantity"] == 2
        assert rows[1].details["quantityDifference"] == 1
    finally:
        s.close()


def _age_cart(user_id: int, hours: int):
    s = SessionLocal()
    try:
        s.execute(
            update(CartModel)
            .where(CartModel.user_id == user_id)
            .values(updated_at=datetime.now(timezone.utc) - timedelta(hours=hours))
        )
        s.commit()
    finally:
        s.close()


def test_release_abandoned_carts(db, make, stock_of):
    stale_user = make.user(name="Stale")
    active_user = make.user(name="Active")
    pid = make.product(stock=10)
    svc = CartService(db)
    svc.add_item(stale_user, pid, 3)
    svc.add_item(active_user, pid, 2)
    _age_cart(stale_user, hours=2)

    released = svc.release_abandoned_carts(timedelta(hours=1))

    assert released == 1
    assert stock_of(pid) == 8
    assert svc.get_cart(stale_user)["items"] == []
    assert svc.get_cart(active_user)["items"][0]["quantity"] == 2


def test_release_abandoned_carts_task(make, stock_of):
    from storefront.tasks.expire import release_abandoned_carts_task

    user_id = make.user()
    pid = make.product(stock=5)
    s = SessionLocal()
    try:
        CartService(s).add_item(user_id, pid, 5)
    finally:
        s.close()
    _age_cart(user_id, hours=1)

    # TTL 0 (domyslnie) = rezerwacje nie wygasaja
    assert release_abandoned_carts_task() == 0
    assert stock_of(pid) == 0

    assert release_abandoned_carts_task(ttl_seconds=60) == 1
    assert stock_of(pid) == 5
