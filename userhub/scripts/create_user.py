"""
Create a user with any role (e.g. the first admin; signup only creates plain users). Run from project root:
  python -m userhub.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m userhub.scripts.create_user "Ada Admin" admin@example.com your-secure-password admin
"""
import argparse
import logging
import sys

from userhub.core.config import get_settings
from userhub.core.database import SessionLocal
from userhub.core.errors import DuplicateKeyError, ValidationFailedError
from userhub.core.logging_config import configure_logging
from userhub.core.security import PasswordHasher
from userhub.models.user import Role
from userhub.repositories.users import UserRepository
from userhub.schemas.auth import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Userhub user with an explicit role.")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email address (login)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.USER.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    db = SessionLocal()
    try:
        repo = UserRepository(db)
        if repo.find_by_email(args.email) is not None:
            print(f"User '{args.email}' already exists.", file=sys.stderr)
            return 1
        user = repo.create(
            name=args.name,
            email=args.email,
            password_hash=hasher.hash(args.password),
            role=Role(args.role),
        )
    except (DuplicateKeyError, ValidationFailedError) as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    logger.info("Created user email=%s role=%s", user.email, user.role.value)
    print(f"Created user '{user.email}' with role '{user.role.value}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
