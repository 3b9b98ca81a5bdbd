"""
Create an account (e.g. the first admin) in the configured store. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [--name NAME] [--role ROLE] [--tier TIER]
Example:
  python -m app.scripts.create_user admin your-secure-password --role admin --tier premium
"""
import argparse
import logging
import sys

from app.core.config import get_settings
from app.core.enums import Role, Tier
from app.core.errors import AppError
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, USERNAME_MAX_LEN, hash_password
from app.repositories import build_repositories

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a MethodHub account.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("--name", default=None, help="Display name (defaults to the username)")
    parser.add_argument("--role", default=Role.USER.value, choices=[r.value for r in Role])
    parser.add_argument("--tier", default=Tier.BASIC.value, choices=[t.value for t in Tier])
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL is not set; the account would vanish on exit.")
        return 1
    repos = build_repositories(settings)
    try:
        if repos.accounts.get_by_username(username) is not None:
            print(f"User '{username}' already exists.", file=sys.stderr)
            return 1
        repos.accounts.add(
            username=username,
            name=(args.name or username).strip(),
            password_hash=hash_password(args.password, rounds=settings.BCRYPT_ROUNDS),
            role=Role(args.role),
            tier=Tier(args.tier),
        )
    except AppError as e:
        logger.error("Could not create user: %s", e.message)
        return 1
    print(f"Created user '{username}' with role '{args.role}' and tier '{args.tier}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
