from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_ph = PasswordHasher()


def hash_code(code: str) -> str:
    return _ph.hash(code)


def verify_code(hash_: str, code: str) -> bool:
    try:
        return _ph.verify(hash_, code)
    except (VerificationError, InvalidHashError):
        return False
