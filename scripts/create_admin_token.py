"""Mint a staff bearer token for local development.

Usage:
    uv run python -m scripts.create_admin_token <user_id> [role] [email]
Role defaults to admin. The token is signed with SECRET_KEY.
"""

import sys

from civic_admin.domain.enums import STAFF_ROLES, UserRole
from civic_admin.infrastructure.security.jwt import create_access_token


def main() -> None:
    if len(sys.argv) < 2:
        print(
            "Usage: uv run python -m scripts.create_admin_token <user_id> [role] [email]",
            file=sys.stderr,
        )
        sys.exit(1)
    user_id = sys.argv[1]
    role_name = sys.argv[2] if len(sys.argv) > 2 else UserRole.ADMIN.value
    email = sys.argv[3] if len(sys.argv) > 3 else ""
    try:
        role = UserRole(role_name)
    except ValueError:
        role = None
    if role not in STAFF_ROLES:
        allowed = ", ".join(sorted(r.value for r in STAFF_ROLES))
        print(f"Role must be one of: {allowed}", file=sys.stderr)
        sys.exit(1)
    print(create_access_token(user_id, role.value, email=email))


if __name__ == "__main__":
    main()
