from typing import Any, Dict, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jwt import PyJWTError
from app.auth.jwt import decode_token

bearer = HTTPBearer(auto_error=False)


def access_claims(token: str) -> Optional[Dict[str, Any]]:
    try:
        data = decode_token(token)
    except PyJWTError:
        return None
    if data.get("typ") != "access" or not data.get("sub"):
        return None
    return data


def _claims(creds: Optional[HTTPAuthorizationCredentials]) -> Dict[str, Any]:
    if not creds:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    data = access_claims(creds.credentials)
    if data is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    return data


def get_current_user_id(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> str:
    return _claims(creds)["sub"]


def get_current_email(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> str:
    return _claims(creds).get("email") or ""
