"""
Create a profile or change an existing profile's role. Run from project root:
  python -m controle_financeiro.scripts.create_user EMAIL PASSWORD [--role N]
  python -m controle_financeiro.scripts.create_user EMAIL --set-role N
Example (first administrator):
  python -m controle_financeiro.scripts.create_user admin@example.com your-secure-password --role 1
"""
import argparse
import logging
import sys
from datetime import UTC, datetime

from controle_financeiro.core.database import SessionLocal
from controle_financeiro.core.roles import ROLE_DESCRIPTIONS, Role
from controle_financeiro.core.security import PASSWORD_MIN_LEN, hash_password, normalize_email
from controle_financeiro.models import Profile

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

ROLE_CHOICES = [int(r) for r in Role]


def build_parser() -> argparse.ArgumentParser:
    roles_help = ", ".join(f"{int(r)}={d}" for r, d in ROLE_DESCRIPTIONS.items())
    parser = argparse.ArgumentParser(description="Create or promote a Controle Financeiro user.")
    parser.add_argument("email", help="E-mail (normalized to lower case)")
    parser.add_argument("password", nargs="?", help=f"Password (at least {PASSWORD_MIN_LEN} chars)")
    parser.add_argument("--role", type=int, choices=ROLE_CHOICES, default=int(Role.READ_ONLY), help=roles_help)
    parser.add_argument("--set-role", type=int, choices=ROLE_CHOICES, help="Change the role of an existing user")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    email = normalize_email(args.email)
    if not email:
        print("E-mail is required.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        existing = db.query(Profile).filter(Profile.email == email).first()
        if args.set_role is not None:
            if args.password is not None:
                print("--set-role does not change passwords; omit PASSWORD.", file=sys.stderr)
                return 1
            if existing is None:
                print(f"User '{email}' not found.", file=sys.stderr)
                return 1
            existing.role_id = args.set_role
            existing.updated_at = datetime.now(UTC)
            db.commit()
            logger.info("Set role_id=%s for %s", args.set_role, email)
            return 0

        if not args.password or len(args.password) < PASSWORD_MIN_LEN:
            print(f"Password must have at least {PASSWORD_MIN_LEN} characters.", file=sys.stderr)
            return 1
        if existing:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        db.add(
            Profile(
                email=email,
                password_hash=hash_password(args.password),
                role_id=args.role,
                updated_at=datetime.now(UTC),
            )
        )
        db.commit()
        logger.info("Created user %s with role_id=%s", email, args.role)
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
