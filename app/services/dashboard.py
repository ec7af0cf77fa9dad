from pydantic import BaseModel

from app.schemas.jobs import COMPLETED, HELD, IN_PRODUCTION, PENDING_MATCH, Job
from app.schemas.profiles import TailorProfile


class BrandDashboard(BaseModel):
    active_orders: int
    total_spent: float
    escrow_held: float
    jobs: list[Job]


class TailorDashboard(BaseModel):
    open_jobs: list[Job]
    active_jobs: list[Job]
    history: list[Job]
    earnings: float


def brand_dashboard(jobs: list[Job]) -> BrandDashboard:
    return BrandDashboard(
        active_orders=sum(1 for j in jobs if j.status != COMPLETED),
        total_spent=sum(j.budget or 0 for j in jobs),
        escrow_held=sum(j.budget or 0 for j in jobs if j.escrow_status == HELD),
        jobs=jobs,
    )


def tailor_dashboard(jobs: list[Job], profile: TailorProfile) -> TailorDashboard:
    mine = [j for j in jobs if j.tailor_id == profile.uid]
    history = [j for j in mine if j.status == COMPLETED]
    return TailorDashboard(
        open_jobs=[j for j in jobs if j.status == PENDING_MATCH],
        active_jobs=[j for j in mine if j.status == IN_PRODUCTION],
        history=history,
        # lifetime total kept on the profile
        earnings=profile.total_earnings,
    )
