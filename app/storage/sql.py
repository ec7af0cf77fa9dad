from typing import Any, Collection, Mapping, Optional

from sqlalchemy import or_, select, text, update

from app.core.db import Base, make_engine, make_sessionmaker
from app.models.models import JobRecord, ProfileRecord


class SqlBackend:
    """Remote persistence on any SQLAlchemy async dialect, scoped by application id."""

    name = "remote"

    def __init__(self, url: str, app_id: str, create_schema: bool = False) -> None:
        self.url = url
        self.app_id = app_id
        self.create_schema = create_schema
        self._engine = None
        self._sessions = None

    async def connect(self) -> None:
        self._engine = make_engine(self.url)
        self._sessions = make_sessionmaker(self._engine)
        async with self._engine.begin() as conn:
            if self.create_schema:
                await conn.run_sync(Base.metadata.create_all)
            await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    async def get_profile(self, uid: str) -> Optional[dict]:
        async with self._sessions() as session:
            rec = await session.get(ProfileRecord, (self.app_id, uid))
            return dict(rec.data) if rec else None

    async def merge_profile(self, uid: str, data: Mapping[str, Any]) -> dict:
        async with self._sessions() as session:
            rec = await session.get(ProfileRecord, (self.app_id, uid))
            if rec is None:
                rec = ProfileRecord(app_id=self.app_id, uid=uid, data={**data, "uid": uid})
                session.add(rec)
            else:
                # reassign so the JSON column is flagged dirty
                rec.data = {**rec.data, **data, "uid": uid}
            await session.commit()
            return dict(rec.data)

    async def insert_job(self, job: Mapping[str, Any]) -> str:
        async with self._sessions() as session:
            session.add(JobRecord(app_id=self.app_id, **job))
            await session.commit()
        return job["id"]

    async def get_job(self, job_id: str) -> Optional[dict]:
        async with self._sessions() as session:
            res = await session.execute(
                select(JobRecord).where(JobRecord.app_id == self.app_id, JobRecord.id == job_id)
            )
            rec = res.scalar_one_or_none()
            return rec.to_dict() if rec else None

    async def update_job(
        self,
        job_id: str,
        patch: Mapping[str, Any],
        expect: Optional[Mapping[str, Collection[Any]]] = None,
    ) -> bool:
        stmt = update(JobRecord).where(JobRecord.app_id == self.app_id, JobRecord.id == job_id)
        for field, allowed in (expect or {}).items():
            col = getattr(JobRecord, field)
            values = [v for v in allowed if v is not None]
            if len(values) < len(allowed):
                stmt = stmt.where(or_(col.is_(None), col.in_(values)))
            else:
                stmt = stmt.where(col.in_(values))
        stmt = stmt.values(**patch, version=JobRecord.version + 1).execution_options(synchronize_session=False)
        async with self._sessions() as session:
            res = await session.execute(stmt)
            await session.commit()
        return res.rowcount == 1

    async def list_jobs(self, brand_id: Optional[str] = None) -> list[dict]:
        stmt = select(JobRecord).where(JobRecord.app_id == self.app_id)
        if brand_id:
            stmt = stmt.where(JobRecord.brand_id == brand_id)
        stmt = stmt.order_by(JobRecord.created_at.desc())
        async with self._sessions() as session:
            res = await session.execute(stmt)
            return [rec.to_dict() for rec in res.scalars().all()]
