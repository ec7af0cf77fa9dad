from app.services.recs.service import CANNED_TAILORS, RecommendationService

__all__ = ["CANNED_TAILORS", "RecommendationService"]
