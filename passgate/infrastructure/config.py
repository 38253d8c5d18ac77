"""Process configuration read from the environment.

Required:
    GATE_PASSWORD        – the shared password (plain text), or
    GATE_PASSWORD_HASH   – its bcrypt hash instead
    SESSION_SECRET       – key material for the session cookie (>= 32 chars)

Optional:
    SESSION_COOKIE_NAME   – default "passgate_session"
    SESSION_COOKIE_SECURE – default true when ENV=production
    SESSION_MAX_AGE       – cookie lifetime in seconds, default 14 days
    TRUST_PROXY_HEADERS   – use X-Forwarded-For for the client identity
    PROTECTED_CONTENT     – payload served once unlocked
    ALLOWED_ORIGINS       – comma-separated CORS origins
"""
import os
from dataclasses import dataclass, field

MIN_SESSION_SECRET_LENGTH = 32
DEFAULT_COOKIE_NAME = "passgate_session"
DEFAULT_SESSION_MAX_AGE = 14 * 24 * 60 * 60

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class GateSettings:
    session_secret: str
    password: str | None = field(default=None, repr=False)
    password_hash: str | None = field(default=None, repr=False)
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_secure: bool = True
    session_max_age: int = DEFAULT_SESSION_MAX_AGE
    trust_proxy_headers: bool = False
    protected_content: str = "Welcome in."
    allowed_origins: tuple[str, ...] = ()
    env: str = "development"

    def __repr__(self) -> str:
        # Never print secrets, not even in tracebacks.
        return (
            f"GateSettings(env={self.env!r}, cookie_name={self.cookie_name!r}, "
            f"cookie_secure={self.cookie_secure}, trust_proxy_headers={self.trust_proxy_headers})"
        )


def _flag(name: str, default: bool, environ) -> bool:
    raw = environ.get(name, "").strip().lower()
    if not raw:
        return default
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise RuntimeError(f"{name} must be a boolean (true/false), got {raw!r}.")


def load_settings(environ=None) -> GateSettings:
    """Read and validate the environment. Fails fast on anything missing."""
    environ = os.environ if environ is None else environ

    password = environ.get("GATE_PASSWORD") or None
    password_hash = (environ.get("GATE_PASSWORD_HASH") or "").strip() or None
    if not password and not password_hash:
        raise RuntimeError(
            "Missing GATE_PASSWORD environment variable. "
            "Add GATE_PASSWORD=<password> (or GATE_PASSWORD_HASH=<bcrypt hash>) "
            "to your .env file before starting."
        )
    if password and password_hash:
        raise RuntimeError("Set only one of GATE_PASSWORD and GATE_PASSWORD_HASH.")

    session_secret = environ.get("SESSION_SECRET", "")
    if not session_secret:
        raise RuntimeError(
            "Missing SESSION_SECRET environment variable. "
            "Add SESSION_SECRET=<strong-random-value> to your .env file before starting."
        )
    if len(session_secret) < MIN_SESSION_SECRET_LENGTH:
        raise RuntimeError(
            f"SESSION_SECRET must be at least {MIN_SESSION_SECRET_LENGTH} characters long."
        )

    env = environ.get("ENV", "development").strip().lower() or "development"

    raw_max_age = environ.get("SESSION_MAX_AGE", "").strip()
    try:
        max_age = int(raw_max_age) if raw_max_age else DEFAULT_SESSION_MAX_AGE
    except ValueError:
        raise RuntimeError(f"SESSION_MAX_AGE must be an integer, got {raw_max_age!r}.")
    if max_age <= 0:
        raise RuntimeError("SESSION_MAX_AGE must be positive.")

    origins = tuple(
        o.strip() for o in environ.get("ALLOWED_ORIGINS", "").split(",") if o.strip()
    )

    return GateSettings(
        session_secret=session_secret,
        password=password,
        password_hash=password_hash,
        cookie_name=environ.get("SESSION_COOKIE_NAME", "").strip() or DEFAULT_COOKIE_NAME,
        cookie_secure=_flag("SESSION_COOKIE_SECURE", env == "production", environ),
        session_max_age=max_age,
        trust_proxy_headers=_flag("TRUST_PROXY_HEADERS", False, environ),
        protected_content=environ.get("PROTECTED_CONTENT") or "Welcome in.",
        allowed_origins=origins,
        env=env,
    )
