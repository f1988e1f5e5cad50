# storefront/repos/product_repo.py
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def lock_product(self, product_id: int) -> ProductModel | None:
        # SELECT ... FOR UPDATE, populate_existing zeby nie czytac starej wartosci z identity map
        stmt = (
            select(ProductModel)
            .where(ProductModel.id == product_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_stock(self, product_id: int) -> int | None:
        return self.db.execute(
            select(ProductModel.stock_quantity).where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        # warunkowy update - check-and-decrement w jednym zapytaniu
        # np update products set stock = stock - 6 where id = 1 and stock >= 6
        result = self.db.execute(
            update(ProductModel)
            .where(
                ProductModel.id == product_id,
                ProductModel.stock_quantity >= quantity,
            )
            .values(stock_quantity=ProductModel.stock_quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def increment_stock(self, product_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock_quantity=ProductModel.stock_quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
