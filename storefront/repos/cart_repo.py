# storefront/repos/cart_repo.py
from datetime import datetime
from typing import List, Tuple

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.activity import CustomerActivityModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int, lock: bool = False) -> CartModel | None:
        stmt = select(CartModel).where(CartModel.user_id == user_id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_or_create_cart(self, user_id: int, lock: bool = False) -> CartModel:
        cart = self.get_cart_by_user(user_id, lock=lock)
        if cart:
            return cart

        # unique(user_id) - rownolegle pierwsze wejscie drugiego requestu konczy sie IntegrityError
        try:
            with self.db.begin_nested():
                self.db.add(CartModel(user_id=user_id))
        except IntegrityError:
            pass

        return self.get_cart_by_user(user_id, lock=lock)

    def touch(self, cart: CartModel, now: datetime):
        cart.updated_at = now

    def get_item(self, cart_id: int, item_id: int) -> CartItemModel | None:
        stmt = select(CartItemModel).where(
            CartItemModel.id == item_id,
            CartItemModel.cart_id == cart_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def find_item(
        self,
        cart_id: int,
        product_id: int,
        size: str | None,
        color: str | None,
    ) -> CartItemModel | None:
        # NULL != NULL w SQL, wiec osobno is_(None)
        stmt = select(CartItemModel).where(
            CartItemModel.cart_id == cart_id,
            CartItemModel.product_id == product_id,
            CartItemModel.size.is_(None) if size is None else CartItemModel.size == size,
            CartItemModel.color.is_(None) if color is None else CartItemModel.color == color,
        )
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_cart_items(self, cart_id: int) -> List[CartItemModel]:
        stmt = select(CartItemModel).where(CartItemModel.cart_id == cart_id).order_by(CartItemModel.id)
        return list(self.db.execute(stmt).scalars().all())

    def get_cart_lines(self, cart_id: int) -> List[Tuple[CartItemModel, ProductModel]]:
        stmt = (
            select(CartItemModel, ProductModel)
            .join(ProductModel, CartItemModel.product_id == ProductModel.id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        )
        return [(item, product) for item, product in self.db.execute(stmt).all()]

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, item: CartItemModel):
        self.db.delete(item)
        self.db.flush()

    def delete_cart_items(self, cart_id: int) -> int:
        # domyslna synchronizacja sesji - usuniete pozycje nie zostaja w identity map
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        return result.rowcount

    def delete_cart(self, cart: CartModel):
        self.delete_cart_items(cart.id)
        self.db.execute(delete(CartModel).where(CartModel.id == cart.id))

    def find_stale_carts(self, older_than: datetime) -> List[CartModel]:
        stmt = (
            select(CartModel)
            .where(
                CartModel.updated_at < older_than,
                CartModel.items.any(),
            )
            .order_by(CartModel.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_stale_cart(self, cart_id: int, older_than: datetime) -> CartModel | None:
        stmt = (
            select(CartModel)
            .where(CartModel.id == cart_id, CartModel.updated_at < older_than)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def log_activity(self, user_id: int, description: str, details: dict):
        self.db.add(
            CustomerActivityModel(
                customer_id=user_id,
                type="purchase",
                description=description,
                details=details,
            )
        )
