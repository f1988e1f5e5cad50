# tests/test_stock_ledger.py
import pytest

from storefront.data.database import atomic
from storefront.domain.errors import InsufficientStock, ProductNotFound, ValidationError
from storefront.services.stock_ledger import StockLedger


def test_reserve_and_release_move_stock(db, make, stock_of):
    pid = make.product(stock=10)
    ledger = StockLedger(db)

    with atomic(db):
        assert ledger.reserve(pid, 4) == 6
    assert stock_of(pid) == 6

    with atomic(db):
        assert ledger.release(pid, 3) == 9
    assert stock_of(pid) == 9


def test_reserve_exactly_available_stock(db, make, stock_of):
    pid = make.product(stock=5)

    with atomic(db):
        StockLedger(db).reserve(pid, 5)

    assert stock_of(pid) == 0


def test_insufficient_stock_reports_available_and_keeps_stock(db, make, stock_of):
    pid = make.product(stock=3)

    with pytest.raises(InsufficientStock) as exc:
        with atomic(db):
            StockLedger(db).reserve(pid, 4)

    assert exc.value.available == 3
    assert exc.value.detail["available"] == 3
    assert exc.value.status_code == 409
    assert stock_of(pid) == 3


def test_failed_reserve_rolls_back_earlier_changes(db, make, stock_of):
    first = make.product(stock=10)
    second = make.product(stock=1)
    ledger = StockLedger(db)

    with pytest.raises(InsufficientStock):
        with atomic(db):
            ledger.reserve(first, 5)
            ledger.reserve(second, 2)

    assert stock_of(first) == 10
    assert stock_of(second) == 1


def test_unknown_product(db):
    ledger = StockLedger(db)

    with pytest.raises(ProductNotFound):
        with atomic(db):
            ledger.reserve(999, 1)

    with pytest.raises(ProductNotFound):
        with atomic(db):
            ledger.release(999, 1)

    with pytest.raises(ProductNotFound):
        ledger.lock(999)
    db.rollback()


@pytest.mark.parametrize("quantity", [0, -2])
def test_quantity_must_be_positive(db, make, quantity):
    pid = make.product(stock=10)
    ledger = StockLedger(db)

    with pytest.raises(ValidationError):
        ledger.reserve(pid, quantity)
    with pytest.raises(ValidationError):
        ledger.release(pid, quantity)
