# app/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, all routers,
and the board lifecycle (started on startup, disposed on shutdown).
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import board, spots, identity, health
from app.database import create_tables, SessionLocal
from app.config import settings
from app.services.board_service import ParkingBoard
from app.services.identity_service import IdentityStore
from app.services.store_factory import create_spot_store
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Roommate Parking Board API",
    description="Four shared parking spots, claimed and released in near-real-time.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow a browser front-end on the LAN to call the API) ─────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key check.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(board.router,    prefix="/api/v1", tags=["🅿️  Board"])
app.include_router(spots.router,    prefix="/api/v1", tags=["🚗 Spots"])
app.include_router(identity.router, prefix="/api/v1", tags=["👤 Identity"])
app.include_router(health.router,   prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Parking board starting up...")
    create_tables()
    logger.info("✅ Local database ready")

    parking_board = ParkingBoard(create_spot_store(settings), IdentityStore(SessionLocal))
    app.state.board = parking_board
    await parking_board.start()

    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Parking board shutting down...")
    parking_board = getattr(app.state, "board", None)
    if parking_board is not None:
        parking_board.stop()
