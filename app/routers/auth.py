from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from jwt import PyJWTError
from pydantic import BaseModel, EmailStr
from app.auth.jwt import mint_access, mint_refresh, decode_token
from app.core.state import Marketplace, get_marketplace
from app.schemas.profiles import UserProfile

router = APIRouter(prefix="/auth", tags=["auth"])


class OtpRequestIn(BaseModel):
    email: EmailStr


class OtpRequestOut(BaseModel):
    ok: bool = True
    simulated_code: Optional[str] = None


class OtpVerifyIn(BaseModel):
    email: EmailStr
    code: str


class SessionOut(BaseModel):
    access: str
    refresh: str
    uid: str
    provider: str
    store_mode: str
    profile: Optional[UserProfile] = None


class TokenOut(BaseModel):
    access: str
    refresh: str


class RefreshIn(BaseModel):
    refresh: str


@router.post("/otp/request", response_model=OtpRequestOut)
async def request_otp(body: OtpRequestIn, mp: Marketplace = Depends(get_marketplace)):
    code = mp.otp.issue(body.email)
    # no mail transport: outside prod the code is echoed back for the login screen
    if mp.settings.APP_ENV != "prod":
        return OtpRequestOut(ok=True, simulated_code=code)
    return OtpRequestOut(ok=True)


@router.post("/otp/verify", response_model=SessionOut)
async def verify_otp(body: OtpVerifyIn, mp: Marketplace = Depends(get_marketplace)):
    mp.otp.verify(body.email, body.code)
    identity = await mp.identity.authenticate(body.email)
    profile = await mp.profiles.get_profile(identity.uid)
    return SessionOut(
        access=mint_access(identity.uid, identity.email),
        refresh=mint_refresh(identity.uid, identity.email),
        uid=identity.uid,
        provider=identity.provider,
        store_mode=mp.store.mode,
        profile=profile,
    )


@router.post("/refresh", response_model=TokenOut)
async def refresh_token(body: RefreshIn):
    try:
        data = decode_token(body.refresh)
    except PyJWTError:
        raise HTTPException(status_code=401, detail="invalid_refresh")
    if data.get("typ") != "refresh":
        raise HTTPException(status_code=401, detail="invalid_refresh")
    uid = data["sub"]
    email = data.get("email")
    return TokenOut(access=mint_access(uid, email), refresh=mint_refresh(uid, email))
