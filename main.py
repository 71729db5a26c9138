from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from config import get_settings, setup_logging
from core.connection_manager import ConnectionManager
from core.room_registry import RoomRegistry
from dependencies import get_registry, get_connection_manager
from api import rooms, websocket

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: 房間只存在記憶體中，重啟後全部消失
    logger.info("Scrum Poker server starting")
    yield
    # Shutdown
    logger.info(f"Scrum Poker server stopping ({get_registry().room_count()} live rooms dropped)")


app = FastAPI(
    title="Scrum Poker API",
    description="Real-time planning poker rooms with hidden votes and facilitator reveal",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(rooms.router)
app.include_router(websocket.router)


@app.get("/")
def root():
    return {"message": "Scrum Poker API", "status": "ok"}


@app.get("/health")
def health(
    registry: RoomRegistry = Depends(get_registry),
    manager: ConnectionManager = Depends(get_connection_manager)
):
    return {
        "status": "healthy",
        "rooms": registry.room_count(),
        "connections": manager.connection_count()
    }


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Scrum Poker running on http://localhost:{settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)
