"""Bearer token issuing and verification."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from macros_chef.domain.errors import AuthenticationError
from macros_chef.domain.models import CurrentUser

DEFAULT_ALGORITHM = "HS256"
DEFAULT_TTL_DAYS = 7


@dataclass
class TokenService:
    """Signs and verifies JWTs carrying ``userId`` and ``email`` claims."""

    secret: str
    algorithm: str = DEFAULT_ALGORITHM
    ttl_days: int = DEFAULT_TTL_DAYS

    def issue(self, user_id: int, email: str | None = None) -> str:
        """Return a signed token for a user."""
        now = datetime.now(tz=UTC)
        payload = {
            "userId": user_id,
            "email": email,
            "iat": now,
            "exp": now + timedelta(days=self.ttl_days),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> CurrentUser:
        """Return the user a token identifies, raising on any failure."""
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "userId"]},
            )
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError("Unauthorized: Invalid token.") from exc
        user_id = claims.get("userId")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise AuthenticationError("Unauthorized: Invalid token.")
        email = claims.get("email")
        return CurrentUser(id=user_id, email=email if isinstance(email, str) else None)
