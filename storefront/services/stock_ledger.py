# storefront/services/stock_ledger.py
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import InsufficientStock, ProductNotFound, ValidationError
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StockLedger:
    """
    Rezerwacja = fizyczne zmniejszenie products.stock_quantity.
    Nie commituje - transakcja nalezy do wywolujacego, ktory przy
    InsufficientStock musi zrobic rollback calosci.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    def lock(self, product_id: int) -> ProductModel:
        product = self.repo.lock_product(product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product

    def adjust(self, product_id: int, delta: int) -> int:
        if delta < 0:
            rowcount = self.repo.decrement_stock(product_id, -delta)
            if rowcount == 0:
                available = self.repo.get_stock(product_id)
                if available is None:
                    raise ProductNotFound(product_id)
                logger.warning(
                    f"Insufficient stock for product {product_id}: requested {-delta}, available {available}"
                )
                raise InsufficientStock(product_id, available)
        elif delta > 0:
            if self.repo.increment_stock(product_id, delta) == 0:
                raise ProductNotFound(product_id)

        stock = self.repo.get_stock(product_id)
        logger.info(f"Stock of product {product_id} adjusted by {delta}, now {stock}")
        return stock

    def reserve(self, product_id: int, quantity: int) -> int:
        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1")
        return self.adjust(product_id, -quantity)

    def release(self, product_id: int, quantity: int) -> int:
        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1")
        return self.adjust(product_id, quantity)
