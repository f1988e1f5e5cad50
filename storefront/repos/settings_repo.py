from sqlalchemy.orm import Session

from storefront.data.models.app_settings import AppSettingsModel

SETTINGS_ROW_ID = 1


class SettingsRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_settings(self) -> AppSettingsModel | None:
        return self.db.get(AppSettingsModel, SETTINGS_ROW_ID)

    def create_settings(self, row: AppSettingsModel) -> AppSettingsModel:
        row.id = SETTINGS_ROW_ID
        self.db.add(row)
        self.db.flush()
        return row
