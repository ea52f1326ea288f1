"""
ThankMap server application.

Main entry point: a FastAPI app for the REST endpoints, wrapped by the
Socket.IO server that carries the live map events.

Run with: python main.py   (or: uvicorn main:app)
"""

import logging
from contextlib import asynccontextmanager

import socketio
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from database import engine, init_db
from logic.config import get_settings
from logic.logs import setup_logging
from server.realtime import sio
from server.routes import router as routes_router

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Connected to database: %s", engine.url.render_as_string(hide_password=True))
    yield


fastapi_app = FastAPI(title="ThankMap", lifespan=lifespan)

fastapi_app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

fastapi_app.include_router(routes_router)

# Socket.IO handles /socket.io/, everything else falls through to FastAPI
app = socketio.ASGIApp(sio, other_asgi_app=fastapi_app)


def main():
    logger.info("Server running on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
