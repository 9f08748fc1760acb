"""
Account CLI commands: create-admin
"""
import asyncio
import logging

from pydantic import ValidationError

from attendance_backend.config import Settings
from attendance_backend.database import Database
from attendance_backend.errors import APIError
from attendance_backend.orm import UserRole
from attendance_backend.schemas.users import UserCreate
from attendance_backend.security.passwords import PasswordHasher
from attendance_backend.services.user_service import create_user

logger = logging.getLogger(__name__)


class UserCommand:
    """Account CLI command handler."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def execute(self, args) -> int:
        if args.user_action == "create-admin":
            return asyncio.run(self._create_admin(args))
        print("Error: Unknown user action (expected create-admin)")
        return 1

    async def _create_admin(self, args) -> int:
        # Same validation as POST /api/users
        try:
            data = UserCreate(
                email=args.email,
                password=args.password,
                first_name=args.first_name,
                last_name=args.last_name,
                role=UserRole.ADMIN,
            )
        except ValidationError as e:
            for error in e.errors():
                logger.error(f"❌ {'.'.join(str(part) for part in error['loc'])}: {error['msg']}")
            return 1

        database = Database(self.settings.database_url, echo=self.settings.sql_echo)
        hasher = PasswordHasher(rounds=self.settings.bcrypt_rounds)
        try:
            await database.create_all()
            async with database.session() as session:
                user = await create_user(
                    session,
                    hasher,
                    email=data.email,
                    password=data.password,
                    first_name=data.first_name,
                    last_name=data.last_name,
                    role=UserRole.ADMIN,
                )
        except APIError as e:
            logger.error(f"❌ Could not create admin: {e.message}")
            return 1
        finally:
            hasher.shutdown()
            await database.dispose()

        print(f"✓ Admin created: {user.email} (id {user.id})")
        return 0
