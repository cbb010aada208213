"""Main FastAPI application with WebSocket support."""

from fastapi import FastAPI, WebSocket, Depends, Query, status
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uuid
from api import auth_routes, mission_routes, stats_routes, user_routes
from api.dependencies import get_identity_provider, get_mission_service
from api.websocket_handler import tracking_handler
from config.settings import settings
from models.database import (
    init_mongo,
    close_mongo_connection
)
from services.auth_service import AuthError, IdentityProvider
from services.bmi_notifier import BmiChangeNotifier
from services.mission_service import MissionService
from services.step_counter import StepCounter
from utils.logger import setup_logger

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    logger.info("Starting application...")
    app.state.notifier = BmiChangeNotifier()
    app.state.step_counter = StepCounter()
    await init_mongo()  # Connect to MongoDB and initialize collections with indexes
    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await close_mongo_connection()
    logger.info("Application shut down")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Fitness tracking API with BMI-driven missions",
    lifespan=lifespan
)

# Web build, Ionic dev server and the Capacitor shell
frontend_origins = [
    "http://localhost:4200",
    "http://127.0.0.1:4200",
    "http://localhost:8100",
    "capacitor://localhost",
    "http://localhost",
] + settings.cors_origins

# Remove duplicates while preserving order
unique_origins = list(dict.fromkeys(frontend_origins))

logger.info(f"CORS configured with origins: {unique_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=unique_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=600,
)

# Include API routes
app.include_router(auth_routes.router)
app.include_router(user_routes.router)
app.include_router(mission_routes.router)
app.include_router(stats_routes.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "VitalityGo API",
        "version": settings.app_version,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": settings.app_name
    }


@app.websocket("/ws/missions")
async def missions_websocket_endpoint(
    websocket: WebSocket,
    token: str = Query(..., description="Identity provider id token"),
    identity: IdentityProvider = Depends(get_identity_provider),
    missions: MissionService = Depends(get_mission_service),
):
    """WebSocket endpoint for live position tracking and mission updates."""
    session_id = str(uuid.uuid4())

    try:
        user = await identity.lookup(token)
    except AuthError as e:
        logger.info(f"Mission WebSocket rejected: {e.code}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await tracking_handler.run(websocket, session_id, user, missions)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
