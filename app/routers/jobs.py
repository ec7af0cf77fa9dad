import asyncio
import logging
from typing import Optional
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from app.auth.deps import access_claims, get_current_user_id
from app.core.errors import PermissionDenied
from app.core.state import Marketplace, get_marketplace
from app.schemas.jobs import AcceptJobIn, DesignFilesOut, FundEscrowIn, Job, JobCreate, JobsOut
from app.schemas.profiles import BrandProfile, TailorProfile
from app.schemas.recs import TailorRecsOut
from app.services.uploads import design_file_names

router = APIRouter(prefix="/jobs", tags=["jobs"])
logger = logging.getLogger("uvicorn.error")


async def _brand(mp: Marketplace, user_id: str) -> BrandProfile:
    profile = await mp.profiles.require_profile(user_id)
    if not isinstance(profile, BrandProfile):
        raise PermissionDenied("brand_only")
    return profile


async def _tailor(mp: Marketplace, user_id: str) -> TailorProfile:
    profile = await mp.profiles.require_profile(user_id)
    if not isinstance(profile, TailorProfile):
        raise PermissionDenied("tailor_only")
    return profile


@router.post("", response_model=Job)
async def create_job(
    body: JobCreate,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    brand = await _brand(mp, user_id)
    return await mp.jobs.create_job(user_id, brand.display_name, body)


@router.get("", response_model=JobsOut)
async def list_jobs(
    brand_id: Optional[str] = None,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    return JobsOut(items=await mp.jobs.list_jobs(brand_id))


@router.post("/design-files", response_model=DesignFilesOut)
async def upload_design_files(user_id: str = Depends(get_current_user_id)):
    return DesignFilesOut(files=design_file_names())


@router.websocket("/stream")
async def stream_jobs(websocket: WebSocket, token: str, brand_id: Optional[str] = None):
    claims = access_claims(token)
    if claims is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await websocket.accept()
    mp: Marketplace = get_marketplace(websocket)

    async def push(jobs: list[Job]) -> None:
        await websocket.send_json({"items": [j.model_dump(mode="json") for j in jobs]})

    sub = mp.jobs.subscribe(push, brand_id)
    try:
        while True:
            # clients only listen; reading keeps the disconnect observable
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        sub.unsubscribe()
        logger.info("jobs-stream closed sub=%s deliveries=%s", sub.id, sub.deliveries)


@router.get("/{job_id}", response_model=Job)
async def get_job(
    job_id: str,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    return await mp.jobs.get_job(job_id)


@router.post("/{job_id}/accept", response_model=Job)
async def accept_job(
    job_id: str,
    body: Optional[AcceptJobIn] = None,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    tailor = await _tailor(mp, user_id)
    name = (body.tailor_name if body else None) or tailor.display_name
    return await mp.jobs.accept_job(job_id, user_id, name)


@router.get("/{job_id}/recommendations", response_model=TailorRecsOut)
async def recommend_tailors(
    job_id: str,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    await _brand(mp, user_id)
    job = await mp.jobs.get_job(job_id)
    if job.brand_id != user_id:
        raise PermissionDenied("not_job_owner")
    return TailorRecsOut(job_id=job_id, items=await mp.recs.recommend_tailors(job.garment_type))


@router.post("/{job_id}/escrow", response_model=Job)
async def fund_escrow(
    job_id: str,
    body: FundEscrowIn,
    mp: Marketplace = Depends(get_marketplace),
    user_id: str = Depends(get_current_user_id),
):
    await _brand(mp, user_id)
    # a dropped client must not abort a payment that already started
    return await asyncio.shield(mp.jobs.fund_escrow(job_id, body.tailor_id, body.tailor_name, brand_id=user_id))
