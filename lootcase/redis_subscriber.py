import json
import logging
from typing import AsyncGenerator
from redis.asyncio import Redis

HEART_BEAT = 15


class RedisSubscriber:
    """Redis subscriber class to relay broadcast events as SSE."""

    def __init__(self, channel: str):
        """Initialize RedisSubscriber with the channel to relay."""
        self.channel: str = channel

    @staticmethod
    def format_sse(message: str) -> str:
        """Turn a broadcaster message into one SSE frame.

        Args:
            message (str): JSON text of the form {"event": ..., "data": ...}
        """
        envelope = json.loads(message)
        payload = json.dumps(envelope["data"])
        return f"event: {envelope['event']}\ndata: {payload}\n\n"

    async def event_generator(self, redis: Redis) -> AsyncGenerator[str, None]:
        """Event generator to handle SSE events.

        Args:
            redis (Redis): Redis connection object.
        """
        pubsub = redis.pubsub()
        await pubsub.subscribe(self.channel)
        logging.info(f"Subscribed to {self.channel}")
        try:
            while True:
                msg = await pubsub.get_message(
                    ignore_subscribe_messages=True, timeout=HEART_BEAT
                )
                if msg is None:
                    # Comment line keeps proxies from closing an idle stream.
                    yield ": keep-alive\n\n"
                    continue
                if msg["type"] != "message":
                    continue
                try:
                    yield self.format_sse(msg["data"])
                except (ValueError, KeyError) as e:
                    logging.error(f"Malformed message on {self.channel}: {e}")
        finally:
            logging.info(f"Unsubscribing from {self.channel}")
            await pubsub.unsubscribe(self.channel)
            await pubsub.aclose()
