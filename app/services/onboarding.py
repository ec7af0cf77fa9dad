import asyncio
from typing import Awaitable, Callable, Optional

from app.core.errors import ValidationError
from app.schemas.profiles import KycStatus, RateCardItem, TailorDraftOut, TailorProfile

STEP_BASIC_INFO = 1
STEP_RATES = 2
STEP_PORTFOLIO = 3
STEP_KYC = 4

DEFAULT_EXPERIENCE_YEARS = 1


def parse_experience(raw: Optional[str]) -> int:
    try:
        years = int(str(raw).strip())
    except (TypeError, ValueError):
        return DEFAULT_EXPERIENCE_YEARS
    return years if years >= 0 else DEFAULT_EXPERIENCE_YEARS


class TailorOnboarding:
    """Draft state of the four-step tailor wizard.

    Steps can be filled in any order; the only gate is on ``build``, which
    needs a name and a verified identity.
    """

    def __init__(
        self,
        kyc_delay: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.step = STEP_BASIC_INFO
        self.name = ""
        self.experience = ""
        self.specialties: list[str] = []
        self.rate_card: list[RateCardItem] = []
        self.portfolio_images: list[str] = []
        self.kyc_status: KycStatus = "Pending"
        self._kyc_delay = kyc_delay
        self._sleep = sleep

    def go_to(self, step: int) -> int:
        self.step = min(max(step, STEP_BASIC_INFO), STEP_KYC)
        return self.step

    def set_basic_info(self, name: str, experience: Optional[str] = None) -> None:
        self.name = name.strip()
        if experience is not None:
            self.experience = str(experience).strip()

    def toggle_specialty(self, skill: str) -> bool:
        """Select or deselect ``skill``; its rate entry follows. Returns the new selection state."""
        skill = skill.strip()
        if not skill:
            raise ValidationError("specialty_required")
        if skill in self.specialties:
            self.specialties = [s for s in self.specialties if s != skill]
            self.rate_card = [r for r in self.rate_card if r.skill != skill]
            return False
        self.specialties = [*self.specialties, skill]
        self.rate_card = [*self.rate_card, RateCardItem(skill=skill, base_rate=0)]
        return True

    def update_rate(self, skill: str, amount: int) -> None:
        if amount < 0:
            raise ValidationError("negative_rate")
        if skill not in self.specialties:
            raise ValidationError("unknown_specialty", f"{skill} is not a selected specialty")
        self.rate_card = [
            RateCardItem(skill=r.skill, base_rate=amount) if r.skill == skill else r for r in self.rate_card
        ]

    def add_portfolio_image(self, ref: str) -> None:
        self.portfolio_images.append(ref)

    async def verify_identity(self) -> KycStatus:
        # identity documents are not inspected; verification always succeeds
        await self._sleep(self._kyc_delay)
        self.kyc_status = "Verified"
        return self.kyc_status

    def build(self, uid: str, email: str) -> TailorProfile:
        if not self.name:
            raise ValidationError("name_required")
        if self.kyc_status != "Verified":
            raise ValidationError("kyc_not_verified", "identity verification must finish before submitting")
        return TailorProfile(
            uid=uid,
            email=email,
            display_name=self.name,
            specialties=list(self.specialties),
            rate_card=[r.model_copy() for r in self.rate_card],
            experience_years=parse_experience(self.experience),
            rating=5.0,
            portfolio_images=list(self.portfolio_images),
            kyc_status=self.kyc_status,
            total_earnings=0,
            jobs_completed=0,
        )

    def snapshot(self) -> TailorDraftOut:
        return TailorDraftOut(
            step=self.step,
            name=self.name,
            experience=self.experience,
            specialties=list(self.specialties),
            rate_card=[r.model_copy() for r in self.rate_card],
            portfolio_images=list(self.portfolio_images),
            kyc_status=self.kyc_status,
        )


class OnboardingDrafts:
    """Wizard drafts held between HTTP calls, one per user, dropped on submit."""

    def __init__(self, kyc_delay: float = 2.0, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> None:
        self._kyc_delay = kyc_delay
        self._sleep = sleep
        self._drafts: dict[str, TailorOnboarding] = {}

    def get(self, uid: str) -> TailorOnboarding:
        draft = self._drafts.get(uid)
        if draft is None:
            draft = TailorOnboarding(kyc_delay=self._kyc_delay, sleep=self._sleep)
            self._drafts[uid] = draft
        return draft

    def discard(self, uid: str) -> None:
        self._drafts.pop(uid, None)
