import logging
import time
from dataclasses import dataclass
from typing import Callable

from app.auth.passwords import hash_code, verify_code
from app.core.config import Settings
from app.core.errors import ValidationError

logger = logging.getLogger("app.auth")


@dataclass
class Challenge:
    code_hash: str
    expires_at: float


class OtpChallenges:
    """Pending one-time codes keyed by email.

    There is no mail transport: the code is fixed by configuration and
    written to the log, which is how demo users receive it.
    """

    def __init__(self, config: Settings, clock: Callable[[], float] = time.time) -> None:
        self.config = config
        self._clock = clock
        self._pending: dict[str, Challenge] = {}

    def issue(self, email: str) -> str:
        email = email.strip().lower()
        if not email:
            raise ValidationError("email_required")
        code = self.config.OTP_CODE
        self._pending[email] = Challenge(
            code_hash=hash_code(code),
            expires_at=self._clock() + self.config.OTP_TTL_S,
        )
        logger.info("auth: otp issued email=%s code=%s", email, code)
        return code

    def verify(self, email: str, code: str) -> None:
        email = email.strip().lower()
        challenge = self._pending.get(email)
        if challenge is None:
            raise ValidationError("otp_not_requested")
        if challenge.expires_at < self._clock():
            self._pending.pop(email, None)
            raise ValidationError("otp_expired")
        if not verify_code(challenge.code_hash, code.strip()):
            raise ValidationError("invalid_otp", "invalid one-time code")
        self._pending.pop(email, None)
