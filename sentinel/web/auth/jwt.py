"""Verification of tokens issued by the auth provider."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from jose import jwt, JWTError


class TokenData:
    """Parsed token data."""

    def __init__(
        self,
        user_id: str,
        email: Optional[str],
        role: Optional[str],
        exp: datetime,
    ):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.exp = exp

    @property
    def profile_id(self) -> Optional[UUID]:
        """Subject as a UUID, when it is one."""
        try:
            return UUID(self.user_id)
        except ValueError:
            return None


def decode_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
    audience: Optional[str] = None,
) -> Optional[TokenData]:
    """
    Decode and validate a provider-issued JWT.

    Signature, expiry and (when configured) audience are checked.

    Returns:
        TokenData if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            audience=audience,
            options={"verify_aud": bool(audience)},
        )
    except JWTError:
        return None

    user_id = payload.get("sub")
    exp = payload.get("exp")
    if not user_id or exp is None:
        return None

    return TokenData(
        user_id=str(user_id),
        email=payload.get("email"),
        role=payload.get("role"),
        exp=datetime.fromtimestamp(exp, tz=timezone.utc),
    )
