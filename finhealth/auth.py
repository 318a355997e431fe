from __future__ import annotations

import os
from typing import Dict, Optional

from fastapi import Header, HTTPException, status
from jose import JWTError, jwt

from finhealth.config import is_truthy


def _get_env(name: str, default: str = "") -> str:
    value = os.getenv(name)
    if value is not None:
        return str(value)
    # Fallback for BOM-prefixed key names in malformed .env files.
    bom_value = os.getenv(f"\ufeff{name}")
    if bom_value is not None:
        return str(bom_value)
    return default


class SupabaseAuthSettings:
    def __init__(self) -> None:
        self.jwt_secret = _get_env("SUPABASE_JWT_SECRET", "").strip()
        self.audience = _get_env("SUPABASE_JWT_AUDIENCE", "authenticated").strip()
        self.dev_bypass = is_truthy(_get_env("DEV_BYPASS_AUTH", "false"))


def verify_jwt(authorization: Optional[str]) -> Dict:
    settings = SupabaseAuthSettings()
    if settings.dev_bypass:
        return {"sub": "demo-user", "email": "demo@finhealth.local"}

    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token format")

    if not settings.jwt_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token verification is not configured")

    try:
        claims = jwt.decode(
            parts[1],
            settings.jwt_secret,
            algorithms=["HS256"],
            audience=settings.audience or None,
            options={"verify_aud": bool(settings.audience)},
        )
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    if not claims.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has no subject")
    return claims


def current_user(authorization: Optional[str] = Header(None)) -> Dict:
    return verify_jwt(authorization)
