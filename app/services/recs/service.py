import asyncio
from typing import Awaitable, Callable

from app.core.config import Settings, settings as default_settings
from app.schemas.recs import TailorRecommendation

# Matching is a stand-in: the same three tailors come back for every order.
CANNED_TAILORS = [
    TailorRecommendation(
        uid="tailor-1",
        display_name='Elena "The Needle" Rossi',
        rating=4.9,
        match_score=98,
        estimated_quote=1200,
        specialties=["Haute Couture", "Silk", "Evening Wear"],
    ),
    TailorRecommendation(
        uid="tailor-2",
        display_name="Urban Stitch Co.",
        rating=4.7,
        match_score=92,
        estimated_quote=950,
        specialties=["Denim", "Streetwear", "Heavy Canvas"],
    ),
    TailorRecommendation(
        uid="tailor-3",
        display_name="Master Tailor Kim",
        rating=5.0,
        match_score=89,
        estimated_quote=1450,
        specialties=["Suits", "Wool", "Tailoring"],
    ),
]


class RecommendationService:
    def __init__(
        self,
        config: Settings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config or default_settings
        self._sleep = sleep

    async def recommend_tailors(self, garment_type: str) -> list[TailorRecommendation]:
        await self._sleep(self.config.RECS_DELAY_S)
        return [rec.model_copy(deep=True) for rec in CANNED_TAILORS]
