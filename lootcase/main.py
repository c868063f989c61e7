import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from lootcase.broadcaster import broadcaster
from lootcase.db import engine
from lootcase.exceptions import GameError
from lootcase.models.schemas import Base
from lootcase.routers import games, restapi, stream

logging.basicConfig(level=logging.INFO)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app):
    """Create tables and start publishing queued events.
    This function is called to start the server.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    broadcaster.start()
    try:
        yield
    finally:
        await broadcaster.stop()
        await engine.dispose()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(games.games_router)
app.include_router(restapi.rest_router)
app.include_router(stream.stream_router)


@app.exception_handler(GameError)
async def game_error_handler(request: Request, exc: GameError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8080)
