"""Auth service: registration, login and access tokens.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.

Every check here fails closed: an error while hashing, verifying a password
or decoding a token is a rejection, never a pass.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

import bcrypt
from jose import JWTError, jwt

from domain.model.errors import (
    DuplicateError,
    HashError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenError,
    UserExistsError,
    ValidationError,
)
from domain.model.claims import TokenClaims
from domain.model.user import User
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only reads the first 72 bytes of a password; bcrypt 5 rejects longer ones
MAX_PASSWORD_BYTES = 72
JWT_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(hours=24)

_INVALID_CREDENTIALS = "Invalid username or password"


@dataclass(frozen=True)
class AuthResult:
    """Token plus the user it was issued for."""
    token: str
    user: User


class AuthService:
    """Credential and token service.

    Holds the signing secret and a user repository, both injected at
    construction and never changed afterwards, so one instance can be shared
    by concurrent requests.
    """

    def __init__(
        self,
        repo: UserRepository,
        secret: str,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        clock: Callable[[], datetime] | None = None,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.repo = repo
        self._secret = secret
        self._token_ttl = token_ttl
        self._bcrypt_rounds = bcrypt_rounds
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ── passwords ─────────────────────────────────────────────

    def _hash_password(self, password: str) -> str:
        try:
            salt = bcrypt.gensalt(rounds=self._bcrypt_rounds)
            return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
        except (ValueError, TypeError) as e:
            logger.error("Password hashing failed", extra={"error": type(e).__name__})
            raise HashError("Failed to hash password") from e

    def _verify_password(self, plain: str, hashed: str) -> bool:
        if not plain or not hashed:
            return False
        if len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, TypeError) as e:
            # A corrupt stored hash is a mismatch, not a server error.
            logger.warning("Password verification failed", extra={"error": type(e).__name__})
            return False

    # ── registration / login ──────────────────────────────────

    def register(self, username: str, email: str, password: str) -> AuthResult:
        """Register a new user and issue a token for it.

        Raises:
            ValidationError: blank username, email or password, or a password
                longer than MAX_PASSWORD_BYTES in UTF-8
            UserExistsError: username or email already registered
            HashError: password hashing failed
        """
        username = (username or "").strip()
        email = (email or "").strip()
        if not username:
            raise ValidationError("Username must not be empty")
        if not email:
            raise ValidationError("Email must not be empty")
        if not password:
            raise ValidationError("Password must not be empty")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        # A taken name fails here, before any bcrypt work.
        if self.repo.find_by_username_or_email(username, email):
            raise UserExistsError("Username or email already registered")

        password_hash = self._hash_password(password)
        user = User.create(username, email, password_hash, now=self._clock())

        try:
            user = self.repo.create(user)
        except DuplicateError as e:
            # Lost a race with a concurrent registration; the storage
            # constraint is the authority.
            raise UserExistsError("Username or email already registered") from e

        logger.info("User registered", extra={"userId": user.id, "username": user.username})
        return AuthResult(token=self.issue_token(user.id), user=user)

    def login(self, username: str, password: str) -> AuthResult:
        """Authenticate by username and password.

        Unknown username and wrong password raise the same error.

        Raises:
            InvalidCredentialsError: invalid credentials (deliberately vague)
        """
        username = (username or "").strip()
        user = self.repo.get_by_username(username) if username else None
        if user is None or not self._verify_password(password, user.password_hash):
            logger.info("Login rejected", extra={"username": username})
            raise InvalidCredentialsError(_INVALID_CREDENTIALS)

        logger.info("User logged in", extra={"userId": user.id})
        return AuthResult(token=self.issue_token(user.id), user=user)

    def get_user_by_id(self, user_id: str) -> User | None:
        return self.repo.get_by_id(user_id)

    # ── tokens ────────────────────────────────────────────────

    def issue_token(self, user_id: str) -> str:
        """Create a signed access token for user_id, valid for the configured TTL."""
        expires_at = self._clock() + self._token_ttl
        claims = {
            "sub": user_id,
            "exp": int(expires_at.timestamp()),
        }
        try:
            return jwt.encode(claims, self._secret, algorithm=JWT_ALGORITHM)
        except JWTError as e:
            logger.error("Token signing failed", extra={"userId": user_id})
            raise TokenError("Failed to sign token") from e

    def verify_token(self, token: str) -> TokenClaims:
        """Verify signature and expiry of token and return its claims.

        Expiry is checked against the service clock: a token is accepted
        strictly before its exp instant.

        Raises:
            InvalidTokenError: malformed, badly signed, tampered or expired token
        """
        if not token:
            raise InvalidTokenError("Token missing")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"verify_exp": False, "require_exp": True, "require_sub": True},
            )
        except (JWTError, ValueError) as e:
            logger.debug("JWT verification failed: %s", e)
            raise InvalidTokenError("Invalid token") from e

        sub = payload.get("sub")
        exp = payload.get("exp")
        if not isinstance(sub, str) or not sub:
            raise InvalidTokenError("Invalid token subject")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise InvalidTokenError("Invalid token expiration")

        try:
            expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidTokenError("Invalid token expiration") from e
        if self._clock() >= expires_at:
            raise InvalidTokenError("Token expired")

        return TokenClaims(sub=sub, exp=expires_at)
