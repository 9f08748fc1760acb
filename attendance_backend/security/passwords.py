"""
attendance_backend/security/passwords.py
bcrypt password hashing with a fixed work factor
"""
import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from passlib.context import CryptContext


def normalize_password(password: str) -> str:
    """
    bcrypt only supports 72 bytes.
    We safely truncate AFTER UTF-8 encoding to preserve compatibility.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > 72:
        encoded = encoded[:72]
    return encoded.decode("utf-8", errors="ignore")


class PasswordHasher:
    """
    Hashing runs in a small thread pool: bcrypt at work factor 12 takes a
    few hundred milliseconds and would otherwise stall the event loop.
    """

    def __init__(self, rounds: int = 12, max_workers: int = 4):
        self.rounds = rounds
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=self._max_workers)
        return self._executor

    def hash(self, password: str) -> str:
        return self._context.hash(normalize_password(password))

    def verify(self, plain: str, hashed: str) -> bool:
        return self._context.verify(normalize_password(plain), hashed)

    async def hash_async(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._get_executor(), self.hash, password)

    async def verify_async(self, plain: str, hashed: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._get_executor(), self.verify, plain, hashed)

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
