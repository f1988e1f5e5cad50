# storefront/repos/location_repo.py
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.location import DeliveryZoneModel, PickupLocationModel, CustomerAddressModel


class LocationRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_active_zone(self, zone_id: int) -> DeliveryZoneModel | None:
        return self.db.execute(
            select(DeliveryZoneModel).where(
                DeliveryZoneModel.id == zone_id,
                DeliveryZoneModel.is_active.is_(True),
            )
        ).scalar_one_or_none()

    def get_active_pickup_location(self, location_id: int) -> PickupLocationModel | None:
        return self.db.execute(
            select(PickupLocationModel).where(
                PickupLocationModel.id == location_id,
                PickupLocationModel.is_active.is_(True),
            )
        ).scalar_one_or_none()

    def get_customer_address(self, address_id: int, user_id: int) -> CustomerAddressModel | None:
        return self.db.execute(
            select(CustomerAddressModel).where(
                CustomerAddressModel.id == address_id,
                CustomerAddressModel.customer_id == user_id,
            )
        ).scalar_one_or_none()
