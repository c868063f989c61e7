from asyncio import Lock
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict
from uuid import UUID


class UserLockManager:
    """Serializes settlements per user inside one process.

    Locks are created on demand and dropped once nobody holds or waits for them.
    """

    def __init__(self):
        self.locks: Dict[UUID, Lock] = {}  # user_idごとのLock
        self.holders: Dict[UUID, int] = {}  # user_idごとの保持・待機数
        self.lock = Lock()  # locksとholdersへのアクセスを保護

    async def acquire_reference(self, user_id: UUID) -> Lock:
        """Get the Lock of the specified user_id and count the caller as a holder

        Args:
            user_id (UUID): ID to identify the user

        Returns:
            Lock: Lock of the specified user_id
        """
        async with self.lock:
            if user_id not in self.locks:
                self.locks[user_id] = Lock()
                self.holders[user_id] = 0
            self.holders[user_id] += 1
            return self.locks[user_id]

    async def release_reference(self, user_id: UUID):
        """Forget the caller and delete the Lock once it is unused

        Args:
            user_id (UUID): ID to identify the user
        """
        async with self.lock:
            self.holders[user_id] -= 1
            if self.holders[user_id] == 0:
                del self.locks[user_id]
                del self.holders[user_id]

    @asynccontextmanager
    async def hold(self, user_id: UUID) -> AsyncIterator[None]:
        user_lock = await self.acquire_reference(user_id)
        try:
            async with user_lock:
                yield
        finally:
            await self.release_reference(user_id)

    def active_users(self) -> int:
        return len(self.locks)
