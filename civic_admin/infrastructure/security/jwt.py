"""JWT creation and verification for staff bearer tokens.

Tokens carry ``sub`` (user id), ``email`` and ``role``. This service only
verifies them; issuance exists for the dev token script and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from civic_admin.core.config import get_settings


def create_access_token(
    subject: str,
    role: str,
    email: str = "",
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed access token for a staff user.

    Args:
        subject: User ID placed in ``sub``.
        role: Role name (admin, moderator, department_head).
        email: Optional email, shown as the author of manual comments.
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "email": email,
        "exp": datetime.now(UTC) + expires_delta,
    }
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Raises:
        ValueError: If token is invalid, expired, or missing sub/role.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    if not payload.get("role"):
        raise ValueError("Token missing required claim: role")
    return payload
