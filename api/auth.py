from __future__ import annotations  # Admin token dependency

import hmac
from typing import Optional

from fastapi import Header, HTTPException

from config.settings import settings


def extract_token(x_admin_token: Optional[str], authorization: Optional[str]) -> str:  # Header token wins over Bearer
    header_token = (x_admin_token or "").strip()
    if header_token:
        return header_token
    auth = (authorization or "").strip()
    if auth.lower().startswith("bearer "):
        return auth[7:].strip()
    return ""


def require_admin(
    x_admin_token: Optional[str] = Header(default=None),
    authorization: Optional[str] = Header(default=None),
) -> None:  # 500 when no server token is configured, 401 on mismatch
    expected = settings.ADMIN_TOKEN.strip()
    if not expected:
        raise HTTPException(status_code=500, detail="ADMIN_TOKEN is not configured on the server")
    supplied = extract_token(x_admin_token, authorization)
    if not supplied or not hmac.compare_digest(supplied, expected):
        raise HTTPException(status_code=401, detail="Unauthorized (admin)")
