import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from redis.asyncio import Redis

from lootcase.load_secrets import broadcast_queue_size, redis_host, redis_port

GLOBAL_CHANNEL = "cases:opened"
CASE_OPENED_EVENT = "caseOpened"
USER_DATA_UPDATED_EVENT = "userDataUpdated"


def user_channel(user_id: UUID) -> str:
    return f"user:{user_id}"


class OutcomeBroadcaster:
    """Fan-out of game events through redis pub/sub.

    Events are queued synchronously and published in FIFO order by a worker
    task, so callers never wait on redis. Delivery is best-effort: a full
    queue or a failed publish drops the event.
    """

    def __init__(self, redis: Redis, maxsize: int = 50):
        self.redis = redis
        self.queue: asyncio.Queue[Tuple[str, str]] = asyncio.Queue(maxsize=maxsize)
        self._worker: Optional[asyncio.Task] = None

    def emit_global(self, event: str, payload: Dict[str, Any]) -> bool:
        return self._enqueue(GLOBAL_CHANNEL, event, payload)

    def emit_to_user(self, user_id: UUID, event: str, payload: Dict[str, Any]) -> bool:
        return self._enqueue(user_channel(user_id), event, payload)

    def _enqueue(self, channel: str, event: str, payload: Dict[str, Any]) -> bool:
        message = json.dumps({"event": event, "data": payload})
        try:
            self.queue.put_nowait((channel, message))
        except asyncio.QueueFull:
            logging.warning(f"Broadcast queue full, dropping {event} for {channel}")
            return False
        return True

    async def publish(self, channel: str, message: str) -> None:
        try:
            await self.redis.publish(channel, message)
        except Exception as e:
            logging.error(f"Failed to publish to {channel}: {e}")

    async def publish_pending(self) -> int:
        """Publish everything currently queued

        Returns:
            int: Number of messages taken from the queue
        """
        count = 0
        while not self.queue.empty():
            channel, message = self.queue.get_nowait()
            try:
                await self.publish(channel, message)
            finally:
                self.queue.task_done()
            count += 1
        return count

    async def run(self) -> None:
        while True:
            channel, message = await self.queue.get()
            try:
                await self.publish(channel, message)
            finally:
                self.queue.task_done()

    def start(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self.run())

    async def stop(self) -> None:
        """Stop the worker and flush what is left in the queue"""
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None
        await self.publish_pending()


redis = Redis(host=redis_host, port=redis_port, decode_responses=True, health_check_interval=30)
broadcaster = OutcomeBroadcaster(redis, maxsize=broadcast_queue_size)


def get_broadcaster() -> OutcomeBroadcaster:
    return broadcaster
