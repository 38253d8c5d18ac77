"""Session cookie codec: HS256-signed JWT wrapped in a JWE (dir + A256GCM).

The cookie value is opaque to the client. The only claim carried is
``authenticated``; lifetime is bounded by the cookie's Max-Age.
"""
import hashlib
import hmac
import logging

from jose import jwe, jwt
from jose.exceptions import JOSEError

from passgate.domain.session import SessionState

ALGORITHM = "HS256"
ENCRYPTION = "A256GCM"

logger = logging.getLogger("passgate.session")


def _derive(secret: str, purpose: bytes) -> bytes:
    # Separate keys for signing and encryption, both from SESSION_SECRET.
    return hmac.new(secret.encode("utf-8"), purpose, hashlib.sha256).digest()


class SessionCookieCodec:
    """Turns a SessionState into a cookie value and back."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("A session secret is required.")
        self._signing_key = _derive(secret, b"passgate-session-sign")
        self._encryption_key = _derive(secret, b"passgate-session-encrypt")

    def encode(self, session: SessionState) -> str:
        signed = jwt.encode(session.to_dict(), self._signing_key, algorithm=ALGORITHM)
        token = jwe.encrypt(
            signed, self._encryption_key, algorithm="dir", encryption=ENCRYPTION
        )
        return token.decode("ascii") if isinstance(token, bytes) else token

    def decode(self, value: str | None) -> SessionState | None:
        """Return the session, or None when the value is missing or not ours."""
        if not value:
            return None
        try:
            signed = jwe.decrypt(value, self._encryption_key)
            if isinstance(signed, bytes):
                signed = signed.decode("utf-8")
            claims = jwt.decode(signed, self._signing_key, algorithms=[ALGORITHM])
        except (JOSEError, ValueError, TypeError, KeyError) as exc:
            logger.debug("Discarding unreadable session cookie: %s", type(exc).__name__)
            return None
        return SessionState.from_dict(claims)

    def load(self, value: str | None) -> SessionState:
        """Like decode, but an unreadable cookie is simply an anonymous session."""
        return self.decode(value) or SessionState()
