"""
Database CLI commands: init, seed
"""
import asyncio
import logging

from attendance_backend.config import Settings
from attendance_backend.database import Database
from attendance_backend.security.passwords import PasswordHasher
from attendance_backend.seed.demo_data import seed_demo_data

logger = logging.getLogger(__name__)


class DbCommand:
    """Database CLI command handler."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def execute(self, args) -> int:
        if args.db_action == "init":
            return asyncio.run(self._init())
        elif args.db_action == "seed":
            return asyncio.run(self._seed())
        else:
            print("Error: Unknown database action (expected init or seed)")
            return 1

    async def _init(self) -> int:
        database = Database(self.settings.database_url, echo=self.settings.sql_echo)
        try:
            await database.create_all()
        finally:
            await database.dispose()
        return 0

    async def _seed(self) -> int:
        database = Database(self.settings.database_url, echo=self.settings.sql_echo)
        hasher = PasswordHasher(rounds=self.settings.bcrypt_rounds)
        try:
            await database.create_all()
            await seed_demo_data(database, hasher)
        finally:
            hasher.shutdown()
            await database.dispose()
        logger.info("✅ Demo data seeding complete")
        return 0
