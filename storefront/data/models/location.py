# storefront/data/models/location.py
from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Text

from storefront.data.database import Base


class DeliveryZoneModel(Base):
    __tablename__ = "delivery_zones"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    estimated_days = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class PickupLocationModel(Base):
    __tablename__ = "pickup_locations"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    area_name = Column(String(255), nullable=True)
    landmark = Column(Text, nullable=True)
    contact_phone = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)


class CustomerAddressModel(Base):
    __tablename__ = "customer_addresses"

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    region_name = Column(String(255), nullable=True)
    city_name = Column(String(255), nullable=True)
    area_name = Column(String(255), nullable=True)
    landmark = Column(Text, nullable=True)
    additional_instructions = Column(Text, nullable=True)
    contact_phone = Column(String(50), nullable=True)
