from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Float, BigInteger, Text, JSON, Index
from app.core.db import Base


class JobRecord(Base):
    """Production order, scoped by application id (artifacts/{app_id}/public/data/jobs)."""

    __tablename__ = "job"
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    app_id: Mapped[str] = mapped_column(String(128), nullable=False)
    garment_type: Mapped[str] = mapped_column(String(200), default="")
    quantity: Mapped[int] = mapped_column(Integer, default=0)
    sizing: Mapped[dict] = mapped_column(JSON, nullable=False)
    fabric_type: Mapped[str] = mapped_column(String(200), default="")
    deadline: Mapped[str | None] = mapped_column(String(32), nullable=True)
    budget: Mapped[float] = mapped_column(Float, default=0)
    design_files: Mapped[list | None] = mapped_column(JSON, nullable=True)
    brand_id: Mapped[str] = mapped_column(String(128), nullable=False)
    brand_name: Mapped[str] = mapped_column(String(200), default="")
    status: Mapped[str] = mapped_column(String(32), default="Pending Match")
    escrow_status: Mapped[str] = mapped_column(String(32), default="Unpaid")
    tailor_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    tailor_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    version: Mapped[int] = mapped_column(Integer, default=1)

    __table_args__ = (
        Index("ix_job_app_created", "app_id", "created_at"),
        Index("ix_job_app_brand", "app_id", "brand_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "garment_type": self.garment_type,
            "quantity": self.quantity,
            "sizing": dict(self.sizing or {}),
            "fabric_type": self.fabric_type,
            "deadline": self.deadline,
            "budget": self.budget,
            "design_files": list(self.design_files or []),
            "brand_id": self.brand_id,
            "brand_name": self.brand_name,
            "status": self.status,
            "escrow_status": self.escrow_status,
            "tailor_id": self.tailor_id,
            "tailor_name": self.tailor_name,
            "created_at": self.created_at,
            "version": self.version,
        }


class ProfileRecord(Base):
    """One profile document per user (artifacts/{app_id}/users/{uid}/profile/data)."""

    __tablename__ = "user_profile"
    app_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False)
