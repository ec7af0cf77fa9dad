from fastapi import APIRouter, Depends
from app.auth.deps import get_current_user_id
from app.core.state import Marketplace, get_marketplace
from app.schemas.profiles import ProfilePatch, TailorProfile, UserProfile

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=UserProfile)
async def get_my_profile(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    return await mp.profiles.require_profile(user_id)


@router.patch("/me", response_model=UserProfile)
async def update_my_profile(
    body: ProfilePatch,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    return await mp.profiles.update_profile(user_id, body.model_dump(exclude_unset=True))


@router.post("/me/image", response_model=UserProfile)
async def upload_profile_image(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    return await mp.profiles.upload_profile_image(user_id)


@router.post("/me/portfolio", response_model=TailorProfile)
async def add_portfolio_image(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    return await mp.profiles.add_portfolio_image(user_id)
