"""Session token issuing and verification (JWT, HS256 by default)."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from src.core.config import Settings
from src.domain.errors import ExpiredTokenError, InvalidTokenError


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified session token."""

    account_id: UUID
    issued_at: datetime


class TokenIssuer:
    """Signs and verifies session tokens with a process-wide secret."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int | None = None,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret_key=settings.jwt_key,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
        )

    def issue(self, account_id: UUID, now: datetime | None = None) -> str:
        """Create a signed token binding account_id and the issue time.

        Args:
            account_id: Account the token identifies
            now: Issue time (defaults to the current UTC time)

        Returns:
            Encoded JWT string
        """
        issued_at = now or datetime.now(timezone.utc)
        to_encode = {
            "sub": str(account_id),
            "iat": int(issued_at.timestamp()),
        }
        if self.expire_minutes is not None:
            expires_at = issued_at + timedelta(minutes=self.expire_minutes)
            to_encode["exp"] = int(expires_at.timestamp())
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify and decode a token.

        Raises:
            ExpiredTokenError: if the token carries a past expiry
            InvalidTokenError: on bad signature, malformed token or claims
        """
        if not token or not isinstance(token, str):
            raise InvalidTokenError()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise ExpiredTokenError() from e
        except JWTError as e:
            raise InvalidTokenError() from e

        try:
            account_id = UUID(payload["sub"])
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError() from e

        return TokenClaims(account_id=account_id, issued_at=issued_at)
