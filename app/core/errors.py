class StitchError(Exception):
    """Base class for errors raised by the marketplace core."""


class ConfigurationError(StitchError):
    """Backend credentials are missing or still the placeholder."""


class TransportError(StitchError):
    """A remote read, write or subscribe call failed."""


class ValidationError(StitchError):
    """User input rejected before the operation touched the store.

    ``code`` is the snake_case identifier returned to API clients as ``detail``.
    """

    status_code = 422

    def __init__(self, code: str, message: str | None = None) -> None:
        super().__init__(message or code)
        self.code = code
        self.message = message or code


class JobNotFound(ValidationError):
    status_code = 404

    def __init__(self, job_id: str) -> None:
        super().__init__("job_not_found", f"job {job_id} does not exist")
        self.job_id = job_id


class ProfileNotFound(ValidationError):
    status_code = 404

    def __init__(self, uid: str) -> None:
        super().__init__("profile_not_found", f"no profile for {uid}")
        self.uid = uid


class JobStateConflict(ValidationError):
    """The job moved on before this transition could be applied."""

    status_code = 409


class PermissionDenied(ValidationError):
    status_code = 403


class ProfileExists(ValidationError):
    """Onboarding was repeated for a user who already has a profile."""

    status_code = 409

    def __init__(self, uid: str, role: str) -> None:
        super().__init__("already_onboarded", f"{uid} already has a {role} profile")
        self.uid = uid
