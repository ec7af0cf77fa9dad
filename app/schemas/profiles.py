from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

UserRole = Literal["Brand", "Tailor"]
KycStatus = Literal["Pending", "Verified", "Rejected"]


class RateCardItem(BaseModel):
    skill: str
    base_rate: int = Field(0, ge=0)


class ProfileBase(BaseModel):
    model_config = ConfigDict(extra="ignore")
    uid: str
    email: str = ""
    display_name: str = ""
    profile_image: Optional[str] = None


class BrandProfile(ProfileBase):
    role: Literal["Brand"] = "Brand"
    brand_name: str = ""


class TailorProfile(ProfileBase):
    role: Literal["Tailor"] = "Tailor"
    specialties: List[str] = Field(default_factory=list)
    rate_card: List[RateCardItem] = Field(default_factory=list)
    experience_years: int = Field(0, ge=0)
    rating: float = Field(5.0, ge=0, le=5)
    portfolio_images: List[str] = Field(default_factory=list)
    kyc_status: KycStatus = "Pending"
    total_earnings: float = 0
    jobs_completed: int = 0

    @field_validator("specialties")
    @classmethod
    def _dedupe_specialties(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))

    @model_validator(mode="after")
    def _rate_card_within_specialties(self) -> "TailorProfile":
        skills = [r.skill for r in self.rate_card]
        if len(skills) != len(set(skills)):
            raise ValueError("rate card has duplicate skills")
        extra = set(skills) - set(self.specialties)
        if extra:
            raise ValueError(f"rate card skills without specialty: {sorted(extra)}")
        return self


UserProfile = Annotated[Union[BrandProfile, TailorProfile], Field(discriminator="role")]
_profile_adapter: TypeAdapter = TypeAdapter(UserProfile)


def parse_profile(data: Dict[str, Any]) -> BrandProfile | TailorProfile:
    return _profile_adapter.validate_python(data)


class ProfilePatch(BaseModel):
    model_config = ConfigDict(extra="forbid")
    role: Optional[UserRole] = None
    display_name: Optional[str] = None
    profile_image: Optional[str] = None
    brand_name: Optional[str] = None
    specialties: Optional[List[str]] = None
    experience_years: Optional[int] = Field(None, ge=0)
    rate_card: Optional[List[RateCardItem]] = None


class OnboardBrandIn(BaseModel):
    name: str


class BasicInfoIn(BaseModel):
    name: str
    experience: Optional[str] = None


class RateIn(BaseModel):
    amount: int = Field(ge=0)


class TailorDraftOut(BaseModel):
    step: int
    name: str
    experience: str
    specialties: List[str]
    rate_card: List[RateCardItem]
    portfolio_images: List[str]
    kyc_status: KycStatus
