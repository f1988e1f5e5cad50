from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Numeric, String, Text, DateTime, CheckConstraint

from storefront.data.database import Base


class AppSettingsModel(Base):
    __tablename__ = "app_settings"

    id = Column(Integer, primary_key=True, default=1)
    tax_rate = Column(Numeric(5, 2), nullable=False, default=10)
    free_shipping_threshold = Column(Numeric(10, 2), nullable=False, default=100)
    large_order_quantity_threshold = Column(Integer, nullable=False, default=10)
    large_order_delivery_fee = Column(Numeric(10, 2), nullable=False, default=50)
    pickup_address = Column(Text, nullable=True)
    currency_symbol = Column(String(5), nullable=False, default="$")
    currency_code = Column(String(3), nullable=False, default="USD")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (CheckConstraint("id = 1", name="single_row_check"),)
