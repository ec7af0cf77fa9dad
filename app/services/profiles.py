import logging
import random
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError as SchemaError

from app.core.errors import ProfileExists, ProfileNotFound, ValidationError
from app.schemas.profiles import BrandProfile, RateCardItem, TailorProfile, parse_profile
from app.services import uploads
from app.services.onboarding import TailorOnboarding
from app.storage.adapter import DataStoreAdapter

logger = logging.getLogger("app.profiles")

Profile = BrandProfile | TailorProfile

BRAND_ONLY = {"brand_name"}
TAILOR_ONLY = {"specialties", "rate_card", "experience_years", "portfolio_images"}


def sync_rate_card(specialties: Iterable[str], rate_card: Iterable[RateCardItem | dict]) -> list[dict]:
    """Keep exactly one rate entry per specialty: drop stale ones, add zero-rate entries for new ones."""
    wanted = list(dict.fromkeys(specialties))
    kept: dict[str, dict] = {}
    for item in rate_card:
        entry = item.model_dump() if isinstance(item, RateCardItem) else dict(item)
        if entry["skill"] in wanted and entry["skill"] not in kept:
            kept[entry["skill"]] = entry
    return [kept.get(skill, {"skill": skill, "base_rate": 0}) for skill in wanted]


class ProfileService:
    def __init__(self, store: DataStoreAdapter, rng: Optional[random.Random] = None) -> None:
        self.store = store
        self._rng = rng

    async def get_profile(self, uid: str) -> Optional[Profile]:
        data = await self.store.read_profile(uid)
        return parse_profile(data) if data else None

    async def require_profile(self, uid: str) -> Profile:
        profile = await self.get_profile(uid)
        if profile is None:
            raise ProfileNotFound(uid)
        return profile

    async def onboard_brand(self, uid: str, email: str, name: str) -> BrandProfile:
        name = name.strip()
        if not name:
            raise ValidationError("name_required")
        await self._check_role(uid, "Brand")
        profile = BrandProfile(uid=uid, email=email, display_name=name, brand_name=name)
        await self.store.write_profile(uid, profile.model_dump(mode="json"))
        logger.info("profiles: brand onboarded uid=%s", uid)
        return profile

    async def onboard_tailor(self, uid: str, email: str, wizard: TailorOnboarding) -> TailorProfile:
        profile = wizard.build(uid, email)
        await self._check_role(uid, "Tailor")
        await self.store.write_profile(uid, profile.model_dump(mode="json"))
        logger.info("profiles: tailor onboarded uid=%s specialties=%s", uid, len(profile.specialties))
        return profile

    async def _check_role(self, uid: str, role: str) -> None:
        # onboarding creates the profile once; later changes go through update_profile
        existing = await self.get_profile(uid)
        if existing is None:
            return
        if existing.role != role:
            raise ValidationError("role_immutable", f"{uid} is already a {existing.role}")
        raise ProfileExists(uid, role)

    async def update_profile(self, uid: str, partial: Dict[str, Any]) -> Profile:
        """Merge ``partial`` into the stored profile; unspecified fields are left alone."""
        current = await self.require_profile(uid)
        patch = {k: v for k, v in partial.items() if v is not None}
        role = patch.pop("role", None)
        if role is not None and role != current.role:
            raise ValidationError("role_immutable")
        patch.pop("uid", None)
        foreign = TAILOR_ONLY if isinstance(current, BrandProfile) else BRAND_ONLY
        bad = sorted(foreign & patch.keys())
        if bad:
            raise ValidationError("field_not_allowed", f"{current.role} profiles have no {', '.join(bad)}")
        if isinstance(current, TailorProfile) and ("specialties" in patch or "rate_card" in patch):
            specialties = patch.get("specialties", current.specialties)
            patch["specialties"] = list(dict.fromkeys(specialties))
            patch["rate_card"] = sync_rate_card(specialties, patch.get("rate_card", current.rate_card))
        try:
            merged = parse_profile({**current.model_dump(mode="json"), **patch})
        except SchemaError as e:
            raise ValidationError("invalid_profile", str(e)) from e
        dumped = merged.model_dump(mode="json")
        await self.store.write_profile(uid, {k: dumped[k] for k in patch if k in dumped})
        return merged

    async def upload_profile_image(self, uid: str) -> Profile:
        return await self.update_profile(uid, {"profile_image": uploads.random_avatar(self._rng)})

    async def add_portfolio_image(self, uid: str, ref: Optional[str] = None) -> TailorProfile:
        current = await self.require_profile(uid)
        if not isinstance(current, TailorProfile):
            raise ValidationError("field_not_allowed", "only tailors keep a portfolio")
        ref = ref or uploads.random_portfolio_image(self._rng)
        if ref in current.portfolio_images:
            return current
        return await self.update_profile(uid, {"portfolio_images": [*current.portfolio_images, ref]})
