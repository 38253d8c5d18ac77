"""Shared-secret verification -- plain secret or bcrypt hash, both constant-time."""
import hashlib
import secrets

import bcrypt


def hash_secret(plain: str) -> str:
    """Hash a plain-text secret with bcrypt (for GATE_PASSWORD_HASH)."""
    return bcrypt.hashpw(
        plain.encode("utf-8"), bcrypt.gensalt(rounds=12)
    ).decode("utf-8")


def is_bcrypt_hash(hashed: str) -> bool:
    """Return True if the hash string looks like a bcrypt hash."""
    return hashed.startswith("$2b$") or hashed.startswith("$2a$") or hashed.startswith("$2y$")


class SecretVerifier:
    """Compares candidates against the single configured secret.

    Exactly one of ``secret`` / ``secret_hash`` is expected. The plain secret
    is compared through SHA-256 digests so the comparison time does not depend
    on how much of the candidate matches, nor on its length.
    """

    def __init__(self, secret: str | None = None, secret_hash: str | None = None):
        if bool(secret) == bool(secret_hash):
            raise ValueError("Configure exactly one of secret or secret_hash.")
        if secret_hash and not is_bcrypt_hash(secret_hash):
            raise ValueError("secret_hash must be a bcrypt hash.")
        self._digest = _digest(secret) if secret else None
        self._hash = secret_hash.encode("utf-8") if secret_hash else None

    def matches(self, candidate: str) -> bool:
        if not candidate:
            return False
        if self._hash is not None:
            try:
                return bcrypt.checkpw(candidate.encode("utf-8"), self._hash)
            except (ValueError, TypeError):
                return False
        return secrets.compare_digest(_digest(candidate), self._digest)

    def __repr__(self) -> str:
        kind = "bcrypt" if self._hash is not None else "plain"
        return f"SecretVerifier({kind})"


def _digest(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()
