from typing import List
from pydantic import BaseModel, Field


class TailorRecommendation(BaseModel):
    uid: str
    display_name: str
    rating: float = Field(ge=0, le=5)
    match_score: int = Field(ge=0, le=100)
    estimated_quote: float
    specialties: List[str]


class TailorRecsOut(BaseModel):
    job_id: str
    items: List[TailorRecommendation]
