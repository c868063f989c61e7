from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from lootcase.broadcaster import GLOBAL_CHANNEL, redis, user_channel
from lootcase.models.schema_models import UserSchema
from lootcase.redis_subscriber import RedisSubscriber
from lootcase.routers.games import basic_auth

stream_router = APIRouter(prefix="/stream", tags=["stream"])

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


class StreamServer:
    @staticmethod
    @stream_router.get("/feed")
    async def stream_feed():
        """Public spectator feed of every case opening"""
        redis_subscriber = RedisSubscriber(GLOBAL_CHANNEL)
        return StreamingResponse(
            redis_subscriber.event_generator(redis),
            media_type="text/event-stream; charset=utf-8",
            headers=SSE_HEADERS,
        )

    @staticmethod
    @stream_router.get("/me")
    async def stream_user(user_data: UserSchema = Depends(basic_auth.check_user_data)):
        """Private balance/xp/level updates of the authenticated user"""
        redis_subscriber = RedisSubscriber(user_channel(user_data.user_id))
        return StreamingResponse(
            redis_subscriber.event_generator(redis),
            media_type="text/event-stream; charset=utf-8",
            headers=SSE_HEADERS,
        )
