from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text, CheckConstraint

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)

    price = Column(Numeric(10, 2), nullable=False)
    stock_quantity = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    requires_special_delivery = Column(Boolean, nullable=False, default=False)
    delivery_eligible = Column(Boolean, nullable=False, default=True)
    pickup_eligible = Column(Boolean, nullable=False, default=True)

    __table_args__ = (CheckConstraint("stock_quantity >= 0", name="ck_products_stock_non_negative"),)
