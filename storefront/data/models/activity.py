from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, Text, DateTime, JSON

from storefront.data.database import Base


class CustomerActivityModel(Base):
    __tablename__ = "customer_activity"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False)  # purchase, ...
    description = Column(Text, nullable=False)
    # "metadata" jest zarezerwowane w declarative
    details = Column("metadata", JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
