"""Create a staff account from the command line.

Example:
    python scripts/create_admin.py --name "Clinic Admin" --email admin@clinic.org
"""

import argparse
import asyncio
import getpass
import sys

from pydantic import ValidationError

from healx.config import settings
from healx.core.exceptions import ConflictException
from healx.database import Database
from healx.schemas.auth import StaffCreate, StaffRole
from healx.services.auth_service import AuthService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a staff account")
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument(
        "--role",
        choices=[role.value for role in StaffRole],
        default=StaffRole.ADMIN.value,
    )
    parser.add_argument("--specialization")
    parser.add_argument("--password", help="Prompted for when omitted")
    return parser.parse_args(argv)


async def create_account(data: StaffCreate) -> dict:
    database = Database.from_settings(settings)
    try:
        async with database.sessionmaker() as session:
            return await AuthService(session).create_staff(data)
    finally:
        await database.dispose()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    password = args.password or getpass.getpass("Password: ")

    try:
        data = StaffCreate(
            name=args.name,
            email=args.email,
            password=password,
            role=StaffRole(args.role),
            specialization=args.specialization,
        )
    except ValidationError as e:
        print(f"✗ Invalid input: {e}", file=sys.stderr)
        sys.exit(2)

    try:
        member = asyncio.run(create_account(data))
    except ConflictException as e:
        print(f"✗ {e.message}", file=sys.stderr)
        sys.exit(1)

    print(f"✓ Created {member['role']} {member['email']} ({member['employee_id']})")


if __name__ == "__main__":
    main()
