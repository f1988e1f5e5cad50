# storefront/utils/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from storefront.utils.settings import JWT_ALG, JWT_EXPIRE_MIN, JWT_SECRET


def create_token(user_id: int, role: str = "customer") -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=JWT_EXPIRE_MIN)
    payload = {"sub": str(user_id), "role": role, "exp": exp}
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_token(token: str) -> Dict[str, Any] | None:
    try:
        data = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
        return {"id": int(data["sub"]), "role": data.get("role", "customer")}
    except (JWTError, KeyError, TypeError, ValueError):
        return None
