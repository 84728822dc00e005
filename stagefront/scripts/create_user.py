"""
Create a user without going through the registration form. Run from project root:
  python -m stagefront.scripts.create_user EMAIL PASSWORD ROLE [--name NAME] [--instrument INSTRUMENT]
Example:
  python -m stagefront.scripts.create_user ana@example.com secret-password musician --name Ana
"""
import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from stagefront.core.config import get_settings
from stagefront.core.context import build_context
from stagefront.schemas.auth import RegistrationData
from stagefront.schemas.profile import Role
from stagefront.services.registration import register

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create a Stagefront user.")
    parser.add_argument("email", help="Email, used as the login name")
    parser.add_argument("password", help="Password")
    parser.add_argument("role", choices=[r.value for r in Role])
    parser.add_argument("--name", default="")
    parser.add_argument("--description", default="")
    parser.add_argument("--instrument", default=None)
    args = parser.parse_args()

    email = args.email.strip()
    try:
        data = RegistrationData(
            email=email,
            password=args.password,
            name=args.name,
            role=args.role,
            description=args.description,
            instrument=args.instrument,
        )
    except ValidationError as e:
        for error in e.errors(include_input=False):
            field = ".".join(str(p) for p in error["loc"])
            print(f"Invalid {field}: {error['msg']}", file=sys.stderr)
        return 1
    ctx = build_context(get_settings())
    db = ctx.session_factory()
    try:
        outcome = asyncio.run(register(db, ctx.hasher, data))
        if not outcome.created:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    except Exception as e:
        logger.exception("Creating user failed: %s", e)
        return 1
    finally:
        db.close()
        ctx.close()


if __name__ == "__main__":
    sys.exit(main())
