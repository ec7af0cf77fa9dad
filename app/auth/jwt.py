import time
import jwt
from typing import Any, Dict
from app.core.config import settings


def _encode(claims: Dict[str, Any]) -> str:
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALG)


def mint_access(user_id: str, email: str | None = None) -> str:
    now = int(time.time())
    claims = {"sub": user_id, "iat": now, "exp": now + settings.JWT_ACCESS_TTL_SECONDS, "typ": "access"}
    if email:
        claims["email"] = email
    return _encode(claims)


def mint_refresh(user_id: str, email: str | None = None) -> str:
    now = int(time.time())
    claims = {"sub": user_id, "iat": now, "exp": now + settings.JWT_REFRESH_TTL_SECONDS, "typ": "refresh"}
    if email:
        claims["email"] = email
    return _encode(claims)


def decode_token(tok: str) -> Dict[str, Any]:
    return jwt.decode(tok, settings.SECRET_KEY, algorithms=[settings.JWT_ALG])


def decode_identity_token(tok: str, secret: str, alg: str = "HS256") -> Dict[str, Any]:
    """Verify a token issued by the identity provider (custom sign-in token)."""
    claims = jwt.decode(tok, secret, algorithms=[alg], options={"require": ["sub"]})
    return claims
