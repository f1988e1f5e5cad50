# storefront/services/settings_service.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.database import atomic
from storefront.data.models.app_settings import AppSettingsModel
from storefront.domain.errors import StorageError, ValidationError
from storefront.domain.schemas import SettingsUpdate
from storefront.domain.settings import DEFAULT_SETTINGS, ShopSettings
from storefront.repos.settings_repo import SettingsRepo
from storefront.utils.logging import get_logger
from storefront.utils.retry import read_retry

logger = get_logger(__name__)


def _to_settings(row: AppSettingsModel) -> ShopSettings:
    return ShopSettings(
        tax_rate=Decimal(row.tax_rate),
        free_shipping_threshold=Decimal(row.free_shipping_threshold),
        large_order_quantity_threshold=int(row.large_order_quantity_threshold),
        large_order_delivery_fee=Decimal(row.large_order_delivery_fee),
        pickup_address=row.pickup_address,
        currency_symbol=row.currency_symbol,
        currency_code=row.currency_code,
    )


class SettingsService:
    """
    Ustawienia sklepu (wiersz app_settings id=1).
    Brak wiersza = wartosci domyslne, bez zapisu do bazy.
    """

    def __init__(self, db: Session):
        self.repo = SettingsRepo(db)
        self.db = db

    def _load(self) -> ShopSettings:
        row = self.repo.get_settings()
        if not row:
            return DEFAULT_SETTINGS
        return _to_settings(row)

    @read_retry()
    def _load_standalone(self) -> ShopSettings:
        # wlasna krotka transakcja - po bledzie rollback, kolejna proba startuje od zera
        try:
            settings = self._load()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return settings

    def get_settings(self) -> ShopSettings:
        """
        W transakcji wywolujacego odczyt nie jest ponawiany:
        w Postgresie blad przerywa cala transakcje, wiec kolejne proby i tak by padly.
        """
        try:
            if self.db.in_transaction():
                return self._load()
            return self._load_standalone()
        except SQLAlchemyError as e:
            logger.exception(f"Cannot read app settings: {e}")
            raise StorageError("Storage failure") from e

    def update_settings(self, patch: SettingsUpdate) -> ShopSettings:
        changes = patch.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("No fields provided for update")

        with atomic(self.db):
            row = self.repo.get_settings()
            if not row:
                d = DEFAULT_SETTINGS
                row = self.repo.create_settings(
                    AppSettingsModel(
                        tax_rate=d.tax_rate,
                        free_shipping_threshold=d.free_shipping_threshold,
                        large_order_quantity_threshold=d.large_order_quantity_threshold,
                        large_order_delivery_fee=d.large_order_delivery_fee,
                        pickup_address=d.pickup_address,
                        currency_symbol=d.currency_symbol,
                        currency_code=d.currency_code,
                    )
                )

            for field, value in changes.items():
                if value is None and field != "pickup_address":
                    raise ValidationError(f"{field} cannot be null")
                setattr(row, field, value)
            row.updated_at = datetime.now(timezone.utc)

            settings = _to_settings(row)

        logger.info(f"App settings updated: {sorted(changes)}")
        return settings
