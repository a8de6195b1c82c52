from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TokenClaims:
    """Verified payload of an access token."""
    sub: str
    exp: datetime
