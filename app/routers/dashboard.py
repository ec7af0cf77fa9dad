from fastapi import APIRouter, Depends
from app.auth.deps import get_current_user_id
from app.core.errors import PermissionDenied
from app.core.state import Marketplace, get_marketplace
from app.schemas.profiles import BrandProfile, TailorProfile
from app.services.dashboard import BrandDashboard, TailorDashboard, brand_dashboard, tailor_dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/brand", response_model=BrandDashboard)
async def get_brand_dashboard(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    profile = await mp.profiles.require_profile(user_id)
    if not isinstance(profile, BrandProfile):
        raise PermissionDenied("brand_only")
    return brand_dashboard(await mp.jobs.list_jobs(brand_id=user_id))


@router.get("/tailor", response_model=TailorDashboard)
async def get_tailor_dashboard(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    profile = await mp.profiles.require_profile(user_id)
    if not isinstance(profile, TailorProfile):
        raise PermissionDenied("tailor_only")
    return tailor_dashboard(await mp.jobs.list_jobs(), profile)
