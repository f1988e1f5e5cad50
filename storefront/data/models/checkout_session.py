from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Text
from datetime import datetime, timezone

from storefront.data.database import Base


class CheckoutSessionModel(Base):
    """Oczekujaca platnosc online - bez zmian w stanie magazynu i bez czyszczenia koszyka."""

    __tablename__ = "checkout_sessions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    delivery_method = Column(String(20), nullable=False)
    delivery_zone_id = Column(Integer, ForeignKey("delivery_zones.id", ondelete="SET NULL"), nullable=True)
    delivery_address_id = Column(Integer, ForeignKey("customer_addresses.id", ondelete="SET NULL"), nullable=True)
    pickup_location_id = Column(Integer, ForeignKey("pickup_locations.id", ondelete="SET NULL"), nullable=True)

    subtotal = Column(Numeric(10, 2), nullable=False)
    tax_amount = Column(Numeric(10, 2), nullable=False)
    shipping_fee = Column(Numeric(10, 2), nullable=False)
    large_order_fee = Column(Numeric(10, 2), nullable=False, default=0)
    special_delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)

    customer_notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)
