"""
PASSGATE - Domain Layer: Session State.

A session only ever asserts one thing: that this client already proved it
knows the shared password. It starts anonymous and can only move forward.
"""
from enum import Enum


class SessionStatus(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionState:
    """Client session as carried by the session cookie."""

    def __init__(self, authenticated: bool = False):
        self._status = SessionStatus.AUTHENTICATED if authenticated else SessionStatus.ANONYMOUS

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def mark_authenticated(self) -> bool:
        """Move to AUTHENTICATED. Returns True only when the state actually changed."""
        if self.authenticated:
            return False
        self._status = SessionStatus.AUTHENTICATED
        return True

    def reset(self) -> None:
        """Drop back to ANONYMOUS. Used to undo a transition whose write failed."""
        self._status = SessionStatus.ANONYMOUS

    def to_dict(self) -> dict:
        return {"authenticated": self.authenticated}

    @classmethod
    def from_dict(cls, data: dict | None) -> "SessionState":
        if not isinstance(data, dict):
            return cls()
        return cls(authenticated=data.get("authenticated") is True)

    def __repr__(self) -> str:
        return f"SessionState({self._status.value})"
