import logging
import uuid
from dataclasses import dataclass

from app.auth.jwt import decode_identity_token
from app.core.config import Settings
from app.core.errors import TransportError
from app.storage.adapter import DataStoreAdapter
from app.storage.memory import MOCK_USER_ID

logger = logging.getLogger("app.auth")

DEMO_EMAIL = "dev@stitch.cloud"
_ANON_NS = uuid.UUID("5b0e6a52-63f4-4c35-9a4e-2d7a0c1f9e11")


@dataclass(frozen=True)
class Identity:
    uid: str
    email: str
    provider: str  # "custom_token" | "anonymous" | "demo"


class IdentityProvider:
    """Exchanges a verified login for a user id.

    With a configured pre-issued token the token's subject is the user;
    otherwise an anonymous session is opened. In mock mode, or when the
    exchange fails, a local demo identity is used and the store is
    degraded as well.
    """

    def __init__(self, config: Settings, store: DataStoreAdapter) -> None:
        self.config = config
        self.store = store

    async def authenticate(self, email: str) -> Identity:
        email = email.strip().lower()
        await self.store.start()
        if self.store.degraded:
            return self._demo(email)
        token = self.config.INITIAL_AUTH_TOKEN
        try:
            if token:
                claims = decode_identity_token(token, self.config.IDP_SECRET, self.config.JWT_ALG)
                return Identity(uid=str(claims["sub"]), email=email, provider="custom_token")
            return Identity(uid=self.anonymous_uid(email), email=email, provider="anonymous")
        except Exception as e:
            logger.warning("auth: identity exchange failed, switching to demo mode reason=%s", e)
            self.store.degrade(TransportError(f"auth failed: {e}"))
            return self._demo(email)

    def anonymous_uid(self, email: str) -> str:
        return "anon-" + uuid.uuid5(_ANON_NS, f"{self.config.APP_ID}:{email}").hex[:20]

    def _demo(self, email: str) -> Identity:
        if not email or email == DEMO_EMAIL:
            return Identity(uid=MOCK_USER_ID, email=email or DEMO_EMAIL, provider="demo")
        return Identity(uid="local-" + uuid.uuid5(_ANON_NS, email).hex[:20], email=email, provider="demo")
