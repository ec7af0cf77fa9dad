import copy
import time
from typing import Any, Collection, Mapping, Optional

MOCK_USER_ID = "mock-user-dev"


def now_ms() -> int:
    return int(time.time() * 1000)


def seed_jobs(now: int) -> list[dict]:
    """Demo orders so the tailor board is never empty; one per job status."""
    return [
        {
            "id": "job-preload-1",
            "garment_type": "Wedding Dress",
            "quantity": 1,
            "sizing": {"s": 1, "m": 0, "l": 0, "xl": 0},
            "fabric_type": "Silk Satin",
            "deadline": "2024-12-01",
            "budget": 2500,
            "design_files": [],
            "brand_name": "Bridal Elegance",
            "brand_id": "brand-1",
            "status": "Pending Match",
            "escrow_status": "Unpaid",
            "tailor_id": None,
            "tailor_name": None,
            "created_at": now - 100_000,
            "version": 1,
        },
        {
            "id": "job-preload-2",
            "garment_type": "Denim Jackets",
            "quantity": 50,
            "sizing": {"s": 10, "m": 20, "l": 15, "xl": 5},
            "fabric_type": "Heavy Denim",
            "deadline": "2024-11-15",
            "budget": 4000,
            "design_files": [],
            "brand_name": "Urban Outfitters Co.",
            "brand_id": "brand-2",
            "status": "In Production",
            "escrow_status": "Held",
            "tailor_id": "tailor-2",
            "tailor_name": "Urban Stitch Co.",
            "created_at": now - 200_000,
            "version": 1,
        },
        {
            "id": "job-preload-3",
            "garment_type": "Linen Suits",
            "quantity": 5,
            "sizing": {"s": 0, "m": 2, "l": 2, "xl": 1},
            "fabric_type": "Italian Linen",
            "deadline": "2024-10-30",
            "budget": 1500,
            "design_files": [],
            "brand_name": "Gentlemans Club",
            "brand_id": "brand-3",
            "status": "Completed",
            "escrow_status": "Released",
            "tailor_id": MOCK_USER_ID,
            "tailor_name": "Me",
            "created_at": now - 5_000_000,
            "version": 1,
        },
    ]


class MemoryBackend:
    """In-process job list and profile map used in demo mode.

    No method awaits anything, so each mutation lands in one step of the
    event loop and a poll tick can never see it half applied.
    """

    name = "mock"

    def __init__(self, seed: bool = True, now: Optional[int] = None) -> None:
        self.jobs: list[dict] = seed_jobs(now or now_ms()) if seed else []
        self.profiles: dict[str, dict] = {}

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        return None

    async def get_profile(self, uid: str) -> Optional[dict]:
        profile = self.profiles.get(uid)
        return copy.deepcopy(profile) if profile is not None else None

    async def merge_profile(self, uid: str, data: Mapping[str, Any]) -> dict:
        merged = {**self.profiles.get(uid, {}), **copy.deepcopy(dict(data)), "uid": uid}
        self.profiles[uid] = merged
        return copy.deepcopy(merged)

    async def insert_job(self, job: Mapping[str, Any]) -> str:
        self.jobs.append(copy.deepcopy(dict(job)))
        return job["id"]

    async def get_job(self, job_id: str) -> Optional[dict]:
        job = self._find(job_id)
        return copy.deepcopy(job) if job is not None else None

    async def update_job(
        self,
        job_id: str,
        patch: Mapping[str, Any],
        expect: Optional[Mapping[str, Collection[Any]]] = None,
    ) -> bool:
        job = self._find(job_id)
        if job is None:
            return False
        for field, allowed in (expect or {}).items():
            if job.get(field) not in allowed:
                return False
        job.update(copy.deepcopy(dict(patch)))
        job["version"] = job.get("version", 1) + 1
        return True

    async def list_jobs(self, brand_id: Optional[str] = None) -> list[dict]:
        jobs = [copy.deepcopy(j) for j in self.jobs if not brand_id or j["brand_id"] == brand_id]
        jobs.sort(key=lambda j: j["created_at"], reverse=True)
        return jobs

    def _find(self, job_id: str) -> Optional[dict]:
        for job in self.jobs:
            if job["id"] == job_id:
                return job
        return None
