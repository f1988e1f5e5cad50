# storefront/api/deps.py
from typing import Any, Dict

from fastapi import Depends, Header, HTTPException

from storefront.domain.errors import StorefrontError
from storefront.utils.logging import get_logger
from storefront.utils.security import decode_token

logger = get_logger(__name__)


def get_current_user(authorization: str | None = Header(default=None)) -> Dict[str, Any]:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")

    token = authorization.split(" ", 1)[1].strip()
    user = decode_token(token)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user


def require_admin(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    if user["role"] != "admin":
        logger.warning(f"User {user['id']} tried to access an admin route")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def http_error(e: StorefrontError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.detail)
