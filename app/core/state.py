from dataclasses import dataclass
from typing import Optional

from starlette.requests import HTTPConnection

from app.auth.identity import IdentityProvider
from app.auth.otp import OtpChallenges
from app.core.config import Settings
from app.services.jobs import JobService
from app.services.onboarding import OnboardingDrafts
from app.services.profiles import ProfileService
from app.services.recs import RecommendationService
from app.storage.adapter import DataStoreAdapter


@dataclass
class Marketplace:
    settings: Settings
    store: DataStoreAdapter
    jobs: JobService
    profiles: ProfileService
    recs: RecommendationService
    drafts: OnboardingDrafts
    otp: OtpChallenges
    identity: IdentityProvider


def build_marketplace(config: Settings, store: Optional[DataStoreAdapter] = None) -> Marketplace:
    store = store or DataStoreAdapter(config)
    return Marketplace(
        settings=config,
        store=store,
        jobs=JobService(store, config),
        profiles=ProfileService(store),
        recs=RecommendationService(config),
        drafts=OnboardingDrafts(kyc_delay=config.KYC_DELAY_S),
        otp=OtpChallenges(config),
        identity=IdentityProvider(config, store),
    )


def get_marketplace(conn: HTTPConnection) -> Marketplace:
    return conn.app.state.marketplace
