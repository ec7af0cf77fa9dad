"""Job lifecycle: (status, escrow) moves only forward.

    (Pending Match, Unpaid) --accept--> (In Production, Unpaid)
    (Pending Match, Unpaid) --fund----> (In Production, Held)
    (In Production, Unpaid) --fund----> (In Production, Held)   same tailor only

(Completed, Released) is reached outside this service.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from app.core.config import Settings, settings as default_settings
from app.core.errors import JobNotFound, JobStateConflict, PermissionDenied, ValidationError
from app.notifications.types import Subscription
from app.schemas.jobs import (
    COMPLETED,
    HELD,
    IN_PRODUCTION,
    PENDING_MATCH,
    UNPAID,
    Job,
    JobCreate,
)
from app.storage.adapter import DataStoreAdapter

logger = logging.getLogger("app.jobs")

JobListListener = Callable[[list[Job]], object]


class JobService:
    def __init__(
        self,
        store: DataStoreAdapter,
        config: Settings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.store = store
        self.config = config or default_settings
        self._sleep = sleep

    async def create_job(self, brand_id: str, brand_name: str, payload: JobCreate) -> Job:
        total = payload.sizing.total
        if total <= 0:
            raise ValidationError("empty_order", "add at least one item to the size breakdown")
        if payload.budget < 0:
            raise ValidationError("negative_budget")
        fields = payload.model_dump(mode="json")
        fields.update(quantity=total, brand_id=brand_id, brand_name=brand_name)
        job_id = await self.store.create_job(fields)
        logger.info("jobs: created id=%s brand=%s quantity=%s", job_id, brand_id, total)
        return await self.get_job(job_id)

    async def get_job(self, job_id: str) -> Job:
        data = await self.store.get_job(job_id)
        if data is None:
            raise JobNotFound(job_id)
        return Job.model_validate(data)

    async def accept_job(self, job_id: str, tailor_id: str, tailor_name: Optional[str] = None) -> Job:
        job = await self.get_job(job_id)
        if job.status != PENDING_MATCH:
            raise JobStateConflict("job_not_pending", f"job {job_id} is {job.status}")
        if self.config.ACCEPT_DELAY_S:
            await self._sleep(self.config.ACCEPT_DELAY_S)
        patch = {"status": IN_PRODUCTION, "tailor_id": tailor_id}
        if tailor_name:
            patch["tailor_name"] = tailor_name
        # another tailor may have accepted while we slept
        applied = await self.store.update_job(job_id, patch, expect={"status": (PENDING_MATCH,)})
        if not applied:
            raise JobStateConflict("job_already_taken", f"job {job_id} was accepted by someone else")
        logger.info("jobs: accepted id=%s tailor=%s", job_id, tailor_id)
        return await self.get_job(job_id)

    async def fund_escrow(
        self,
        job_id: str,
        tailor_id: str,
        tailor_name: str,
        brand_id: Optional[str] = None,
    ) -> Job:
        job = await self.get_job(job_id)
        if brand_id is not None and job.brand_id != brand_id:
            raise PermissionDenied("not_job_owner")
        self._check_fundable(job, tailor_id)
        # payment processing; runs to completion once started
        await self._sleep(self.config.ESCROW_DELAY_S)
        applied = await self.store.update_job(
            job_id,
            {
                "status": IN_PRODUCTION,
                "escrow_status": HELD,
                "tailor_id": tailor_id,
                "tailor_name": tailor_name,
            },
            expect={
                "escrow_status": (UNPAID,),
                "status": (PENDING_MATCH, IN_PRODUCTION),
                "tailor_id": (None, tailor_id),
            },
        )
        if not applied:
            raise JobStateConflict("escrow_already_funded", f"job {job_id} changed during payment")
        logger.info("jobs: escrow held id=%s tailor=%s", job_id, tailor_id)
        return await self.get_job(job_id)

    @staticmethod
    def _check_fundable(job: Job, tailor_id: str) -> None:
        if job.status == COMPLETED:
            raise JobStateConflict("job_completed")
        if job.escrow_status != UNPAID:
            raise JobStateConflict("escrow_already_funded")
        if job.status == IN_PRODUCTION and job.tailor_id and job.tailor_id != tailor_id:
            raise JobStateConflict("job_assigned_to_other_tailor")

    async def list_jobs(self, brand_id: Optional[str] = None) -> list[Job]:
        return [Job.model_validate(j) for j in await self.store.list_jobs(brand_id)]

    def subscribe(self, listener: JobListListener, brand_id: Optional[str] = None) -> Subscription:
        def forward(jobs: list[dict]):
            return listener([Job.model_validate(j) for j in jobs])

        return self.store.subscribe_jobs(forward, brand_id)
