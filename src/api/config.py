"""Runtime configuration.

Settings are read from the environment once at startup (api.main loads a
local .env first) and passed explicitly to create_app(). Nothing else in the
codebase reads os.environ.
"""

import os
from dataclasses import dataclass
from typing import Mapping

from adapter.sql.connection import DEFAULT_DATABASE_URL
from adapter.mongodb.connection import DEFAULT_DATABASE_NAME


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    """Parse a boolean environment variable.

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    Anything else (or unset) gives the default.
    """
    raw = env.get(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    jwt_secret_key: str
    database_url: str = DEFAULT_DATABASE_URL
    mongodb_database: str = DEFAULT_DATABASE_NAME
    jwt_expiration_hours: int = 24
    bcrypt_rounds: int = 12
    cors_origins: str = "*"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    use_https: bool = False
    cert_path: str = "cert.pem"
    key_path: str = "key.pem"


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Raises ValueError if JWT_SECRET_KEY is missing or a number is malformed.
    """
    env = os.environ if environ is None else environ

    secret = (env.get("JWT_SECRET_KEY") or "").strip()
    if not secret:
        raise ValueError(
            "JWT_SECRET_KEY environment variable is required. "
            "Generate a secure key with: openssl rand -hex 32"
        )

    return Settings(
        jwt_secret_key=secret,
        database_url=env.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
        mongodb_database=env.get("MONGODB_DATABASE") or DEFAULT_DATABASE_NAME,
        jwt_expiration_hours=_env_int(env, "JWT_EXPIRATION_HOURS", 24),
        bcrypt_rounds=_env_int(env, "BCRYPT_ROUNDS", 12),
        cors_origins=env.get("CORS_ORIGINS", "*"),
        log_level=env.get("LOG_LEVEL", "INFO").upper(),
        host=env.get("HOST", "0.0.0.0"),
        port=_env_int(env, "PORT", 3000),
        use_https=_env_bool(env, "USE_HTTPS", False),
        cert_path=env.get("CERT_PATH", "cert.pem"),
        key_path=env.get("KEY_PATH", "key.pem"),
    )
