from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

JobStatus = Literal["Pending Match", "In Production", "Completed"]
EscrowStatus = Literal["Unpaid", "Held", "Released"]

PENDING_MATCH: JobStatus = "Pending Match"
IN_PRODUCTION: JobStatus = "In Production"
COMPLETED: JobStatus = "Completed"

UNPAID: EscrowStatus = "Unpaid"
HELD: EscrowStatus = "Held"


class Sizing(BaseModel):
    s: int = Field(0, ge=0)
    m: int = Field(0, ge=0)
    l: int = Field(0, ge=0)
    xl: int = Field(0, ge=0)

    @property
    def total(self) -> int:
        return self.s + self.m + self.l + self.xl


class JobCreate(BaseModel):
    garment_type: str = ""
    sizing: Sizing = Field(default_factory=Sizing)
    fabric_type: str = ""
    deadline: Optional[date] = None
    budget: float = 0
    design_files: List[str] = Field(default_factory=list)


class Job(BaseModel):
    model_config = ConfigDict(extra="ignore")
    id: str
    garment_type: str = ""
    quantity: int
    sizing: Sizing
    fabric_type: str = ""
    deadline: Optional[date] = None
    budget: float = 0
    design_files: List[str] = Field(default_factory=list)
    brand_id: str
    brand_name: str = ""
    created_at: int
    status: JobStatus = PENDING_MATCH
    escrow_status: EscrowStatus = UNPAID
    tailor_id: Optional[str] = None
    tailor_name: Optional[str] = None
    version: int = 1


class JobsOut(BaseModel):
    items: List[Job]


class AcceptJobIn(BaseModel):
    tailor_name: Optional[str] = None


class FundEscrowIn(BaseModel):
    tailor_id: str
    tailor_name: str


class DesignFilesOut(BaseModel):
    files: List[str]
