# storefront/api/routers/settings.py
from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import http_error, require_admin
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import SettingsOut, SettingsUpdate
from storefront.services.settings_service import SettingsService

router = APIRouter(prefix="/admin/settings", tags=["settings"])


@router.get("", response_model=SettingsOut)
def get_settings(
    admin: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = SettingsService(db)
    try:
        return svc.get_settings()
    except StorefrontError as e:
        raise http_error(e)


@router.put("", response_model=SettingsOut)
def update_settings(
    payload: SettingsUpdate,
    admin: Dict[str, Any] = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Zmienia tylko przeslane pola, brak wiersza = start od wartosci domyslnych.
    """
    svc = SettingsService(db)
    try:
        return svc.update_settings(payload)
    except StorefrontError as e:
        raise http_error(e)
