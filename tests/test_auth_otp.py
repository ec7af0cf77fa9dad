import jwt
import pytest

from app.auth import deps
from app.auth.identity import DEMO_EMAIL, IdentityProvider
from app.auth.jwt import decode_token, mint_access, mint_refresh
from app.auth.otp import OtpChallenges
from app.core.errors import ValidationError
from app.storage.adapter import DataStoreAdapter
from app.storage.memory import MOCK_USER_ID
from fixtures import FlakyBackend, make_settings

IDP_SECRET = "idp-test-secret-with-enough-length-for-hs256"


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_otp_issue_and_verify(config):
    otp = OtpChallenges(config)
    code = otp.issue(" Dev@Stitch.Cloud ")
    assert code == "123456"
    otp.verify("dev@stitch.cloud", code)
    with pytest.raises(ValidationError) as exc:
        otp.verify("dev@stitch.cloud", code)
    assert exc.value.code == "otp_not_requested"


def test_otp_wrong_code_keeps_challenge(config):
    otp = OtpChallenges(config)
    otp.issue("a@example.com")
    with pytest.raises(ValidationError) as exc:
        otp.verify("a@example.com", "000000")
    assert exc.value.code == "invalid_otp"
    otp.verify("a@example.com", "123456")


def test_otp_expires(config):
    clock = FakeClock()
    otp = OtpChallenges(config, clock=clock)
    otp.issue("a@example.com")
    clock.now += config.OTP_TTL_S + 1
    with pytest.raises(ValidationError) as exc:
        otp.verify("a@example.com", "123456")
    assert exc.value.code == "otp_expired"


def test_otp_requires_email(config):
    with pytest.raises(ValidationError):
        OtpChallenges(config).issue("  ")


def test_tokens_carry_subject_and_type():
    access = decode_token(mint_access("u1", "u1@example.com"))
    refresh = decode_token(mint_refresh("u1", "u1@example.com"))
    assert access["sub"] == refresh["sub"] == "u1"
    assert access["email"] == "u1@example.com"
    assert (access["typ"], refresh["typ"]) == ("access", "refresh")
    assert deps.access_claims(mint_refresh("u1")) is None
    assert deps.access_claims("not-a-token") is None


@pytest.mark.asyncio
async def test_mock_store_gives_demo_identity(store, config):
    idp = IdentityProvider(config, store)
    assert (await idp.authenticate(DEMO_EMAIL)).uid == MOCK_USER_ID
    other = await idp.authenticate("Someone@Example.com")
    assert other.provider == "demo"
    assert other.uid.startswith("local-")
    assert other.uid == (await idp.authenticate("someone@example.com")).uid


@pytest.mark.asyncio
async def test_anonymous_identity_is_stable_per_app(config):
    store = DataStoreAdapter(config, remote=FlakyBackend())
    idp = IdentityProvider(config, store)
    first = await idp.authenticate("a@example.com")
    assert first.provider == "anonymous"
    assert first.uid == (await idp.authenticate("a@example.com")).uid

    other_app = IdentityProvider(make_settings(APP_ID="another-app"), store)
    assert (await other_app.authenticate("a@example.com")).uid != first.uid


@pytest.mark.asyncio
async def test_custom_token_subject_becomes_uid():
    config = make_settings(
        INITIAL_AUTH_TOKEN=jwt.encode({"sub": "brand-77"}, IDP_SECRET, algorithm="HS256"),
        IDP_SECRET=IDP_SECRET,
    )
    store = DataStoreAdapter(config, remote=FlakyBackend())
    identity = await IdentityProvider(config, store).authenticate("b@example.com")
    assert identity.uid == "brand-77"
    assert identity.provider == "custom_token"
    assert store.mode == "remote"


@pytest.mark.asyncio
async def test_bad_custom_token_degrades_to_demo():
    config = make_settings(
        INITIAL_AUTH_TOKEN=jwt.encode({"sub": "brand-77"}, "wrong-secret-wrong-secret-wrong-secret", algorithm="HS256"),
        IDP_SECRET=IDP_SECRET,
    )
    store = DataStoreAdapter(config, remote=FlakyBackend())
    identity = await IdentityProvider(config, store).authenticate(DEMO_EMAIL)
    assert identity.uid == MOCK_USER_ID
    assert identity.provider == "demo"
    assert store.mode == "mock"
