"""Outcomes returned by the gate. Every gate operation resolves to one of these."""
from enum import Enum


class AuthOutcome(str, Enum):
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
    INVALID_INPUT = "invalid_input"
    INVALID_CREDENTIAL = "invalid_credential"
    RATE_LIMITED = "rate_limited"
    TRANSPORT_ERROR = "transport_error"

    @property
    def is_success(self) -> bool:
        return self is AuthOutcome.AUTHENTICATED

    @property
    def message(self) -> str | None:
        """User-facing text. None for outcomes that answer with a status body."""
        return _MESSAGES.get(self)

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


# Lockout and credential messages stay generic: no countdown, no hint about
# which part of the submission was wrong.
_MESSAGES = {
    AuthOutcome.ANONYMOUS: "Not authenticated.",
    AuthOutcome.INVALID_INPUT: "Please enter a password.",
    AuthOutcome.INVALID_CREDENTIAL: "Invalid password, please try again.",
    AuthOutcome.RATE_LIMITED: "Too many attempts, please try again later.",
    AuthOutcome.TRANSPORT_ERROR: "Something went wrong, please try again.",
}

_STATUS_CODES = {
    AuthOutcome.AUTHENTICATED: 200,
    AuthOutcome.ANONYMOUS: 401,
    AuthOutcome.INVALID_INPUT: 400,
    AuthOutcome.INVALID_CREDENTIAL: 401,
    AuthOutcome.RATE_LIMITED: 429,
    AuthOutcome.TRANSPORT_ERROR: 503,
}


class GateResult:
    """Discriminated result of a gate operation."""

    def __init__(self, outcome: AuthOutcome):
        self._outcome = outcome

    @property
    def outcome(self) -> AuthOutcome:
        return self._outcome

    @property
    def authenticated(self) -> bool:
        return self._outcome.is_success

    @property
    def status_code(self) -> int:
        return self._outcome.status_code

    def to_dict(self) -> dict:
        """Response body: ``{authenticated: true}`` on success, ``{message}`` otherwise."""
        if self.authenticated:
            return {"authenticated": True}
        return {"message": self._outcome.message}

    def __eq__(self, other) -> bool:
        if not isinstance(other, GateResult):
            return NotImplemented
        return self._outcome is other._outcome

    def __hash__(self) -> int:
        return hash(self._outcome)

    def __repr__(self) -> str:
        return f"GateResult({self._outcome.name})"
