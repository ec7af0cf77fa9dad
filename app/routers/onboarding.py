from fastapi import APIRouter, Depends
from app.auth.deps import get_current_email, get_current_user_id
from app.core.state import Marketplace, get_marketplace
from app.schemas.profiles import (
    BasicInfoIn,
    BrandProfile,
    OnboardBrandIn,
    RateIn,
    TailorDraftOut,
    TailorProfile,
)
from app.services.onboarding import STEP_KYC, STEP_PORTFOLIO, STEP_RATES
from app.services.uploads import wizard_portfolio_name

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.post("/brand", response_model=BrandProfile)
async def onboard_brand(
    body: OnboardBrandIn,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
    email: str = Depends(get_current_email),
):
    return await mp.profiles.onboard_brand(user_id, email, body.name)


@router.get("/tailor", response_model=TailorDraftOut)
async def get_tailor_draft(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    return mp.drafts.get(user_id).snapshot()


@router.put("/tailor/step/{step}", response_model=TailorDraftOut)
async def go_to_step(
    step: int,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    draft = mp.drafts.get(user_id)
    draft.go_to(step)
    return draft.snapshot()


@router.put("/tailor/basic", response_model=TailorDraftOut)
async def set_basic_info(
    body: BasicInfoIn,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    draft = mp.drafts.get(user_id)
    draft.set_basic_info(body.name, body.experience)
    return draft.snapshot()


@router.post("/tailor/specialties/{skill}", response_model=TailorDraftOut)
async def toggle_specialty(
    skill: str,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    draft = mp.drafts.get(user_id)
    draft.toggle_specialty(skill)
    draft.go_to(max(draft.step, STEP_RATES))
    return draft.snapshot()


@router.put("/tailor/rates/{skill}", response_model=TailorDraftOut)
async def update_rate(
    skill: str,
    body: RateIn,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    draft = mp.drafts.get(user_id)
    draft.update_rate(skill, body.amount)
    return draft.snapshot()


@router.post("/tailor/portfolio", response_model=TailorDraftOut)
async def add_draft_portfolio_image(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    draft = mp.drafts.get(user_id)
    draft.add_portfolio_image(wizard_portfolio_name())
    draft.go_to(max(draft.step, STEP_PORTFOLIO))
    return draft.snapshot()


@router.post("/tailor/kyc", response_model=TailorDraftOut)
async def verify_identity(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    draft = mp.drafts.get(user_id)
    draft.go_to(STEP_KYC)
    await draft.verify_identity()
    return draft.snapshot()


@router.post("/tailor/submit", response_model=TailorProfile)
async def submit_tailor(
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
    email: str = Depends(get_current_email),
):
    profile = await mp.profiles.onboard_tailor(user_id, email, mp.drafts.get(user_id))
    mp.drafts.discard(user_id)
    return profile
