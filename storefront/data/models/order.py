from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Text, Boolean, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    order_number = Column(String(32), nullable=False, unique=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    payment_method = Column(String(20), nullable=False)  # online, on_delivery, on_pickup
    payment_status = Column(String(20), nullable=False, default="pending")  # pending, paid, failed
    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, shipped, delivered, cancelled

    delivery_method = Column(String(20), nullable=False)
    delivery_zone_id = Column(Integer, ForeignKey("delivery_zones.id", ondelete="SET NULL"), nullable=True)
    delivery_address_id = Column(Integer, ForeignKey("customer_addresses.id", ondelete="SET NULL"), nullable=True)
    delivery_address = Column(JSON, nullable=True)
    pickup_location_id = Column(Integer, ForeignKey("pickup_locations.id", ondelete="SET NULL"), nullable=True)

    subtotal = Column(Numeric(10, 2), nullable=False)
    tax_amount = Column(Numeric(10, 2), nullable=False)
    shipping_fee = Column(Numeric(10, 2), nullable=False)
    large_order_fee = Column(Numeric(10, 2), nullable=False, default=0)
    special_delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)

    customer_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    shipped_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)

    product_name = Column(String(255), nullable=False)
    product_description = Column(Text, nullable=True)
    product_image_url = Column(String(500), nullable=True)
    size = Column(String(20), nullable=True)
    color = Column(String(50), nullable=True)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    requires_special_delivery = Column(Boolean, nullable=False, default=False)

    order = relationship("OrderModel", back_populates="items")
