"""FastAPI application entry point."""

import asyncio
import json
import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError

from .config import settings
from .database import warmup_connection_pool
from .errors import ServiceError
from .routers import (
    billing_router,
    campaigns_router,
    comments_router,
    connections_router,
    meetings_router,
    navigation_router,
    notifications_router,
    oauth_router,
    projects_router,
    tasks_router,
    teams_router,
    time_entries_router,
    users_router,
    webhooks_router,
    workflows_router,
)
from .services.auth_service import decode_access_token
from .services.redis_service import redis_service
from .websocket import check_channel_access, manager, route_incoming_message

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown tasks."""
    if settings.db_warmup_connections > 0:
        await warmup_connection_pool(settings.db_warmup_connections)

    logger.info("Connecting to Redis...")
    try:
        await redis_service.connect()
        await manager.initialize_redis()
        await redis_service.start_listening()
        logger.info("Redis pub/sub relay started")
    except Exception as e:
        if settings.redis_required:
            logger.error(f"Redis connection failed and REDIS_REQUIRED=true: {e}")
            raise RuntimeError(
                f"Redis is required for multi-worker deployment but connection failed: {e}"
            )
        logger.warning(f"Redis connection failed, running in single-worker mode: {e}")

    yield

    logger.info("Disconnecting from Redis...")
    await redis_service.disconnect()
    logger.info("Redis disconnected")


app = FastAPI(
    title="Pulseboard API",
    description="Role-based project and task management with real-time updates",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.app_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """Render expected failures as ``{"success": false, "error": ...}``."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": message,
            "details": json.loads(json.dumps(errors, default=str)),
        },
    )


# Database pool exhaustion handler - return 503 so clients can retry
@app.exception_handler(SQLAlchemyTimeoutError)
async def db_pool_exhausted_handler(request: Request, exc: SQLAlchemyTimeoutError):
    logger.warning(f"Database pool exhausted on {request.method} {request.url}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"success": False, "error": "Service temporarily unavailable. Please retry."},
        headers={"Retry-After": "5"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Log all unhandled exceptions with full traceback."""
    logger.error(f"Unhandled exception on {request.method} {request.url}: {type(exc).__name__}: {exc}")
    logger.error(f"Traceback:\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error"},
    )


app.include_router(tasks_router)
app.include_router(time_entries_router)
app.include_router(projects_router)
app.include_router(teams_router)
app.include_router(users_router)
app.include_router(notifications_router)
app.include_router(comments_router)
app.include_router(meetings_router)
app.include_router(billing_router)
app.include_router(campaigns_router)
app.include_router(workflows_router)
app.include_router(connections_router)
app.include_router(oauth_router)
app.include_router(webhooks_router)
app.include_router(navigation_router)


@app.get("/")
async def root():
    return {
        "status": "healthy",
        "service": "Pulseboard API",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    redis_health = await redis_service.health_check()
    return {
        "status": "healthy",
        "redis": redis_health,
        "websocket": {
            "connections": manager.total_connections,
            "channels": manager.total_channels,
        },
    }


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, token: str | None = None):
    """
    WebSocket endpoint for real-time updates.

    Authentication is done via query parameter since browsers can not set
    headers on the handshake::

        ws://localhost:8000/ws?token=<jwt_token>
    """
    if not token:
        await websocket.close(code=4001, reason="Authentication required")
        return

    token_data = decode_access_token(token)
    if token_data is None or not token_data.clerk_id:
        logger.debug("WebSocket connection with invalid token")
        await websocket.close(code=4001, reason="Invalid token")
        return
    user_id = token_data.clerk_id

    connection = await manager.connect(websocket, user_id)
    if connection is None:
        logger.warning(f"WebSocket connection rejected (limit) for user: {user_id}")
        return

    logger.info(f"WebSocket connection established for user: {user_id}")

    RECEIVE_TIMEOUT = 45
    SERVER_PING_INTERVAL = 30
    RATE_LIMIT_MESSAGES = 100  # per window
    RATE_LIMIT_WINDOW = 10  # seconds

    message_timestamps: list[float] = []
    loop = asyncio.get_running_loop()

    async def server_ping_task():
        """Send periodic pings; closes once the token has expired."""
        try:
            while True:
                await asyncio.sleep(SERVER_PING_INTERVAL)
                try:
                    if decode_access_token(token) is None:
                        await websocket.send_json({
                            "type": "error",
                            "data": {"error": "TOKEN_EXPIRED", "message": "Session expired, please re-authenticate"},
                        })
                        await websocket.close(code=4001, reason="Token expired")
                        break
                    await websocket.send_json({"type": "ping", "data": {}})
                except Exception:
                    break
        except asyncio.CancelledError:
            pass

    ping_task = asyncio.create_task(server_ping_task())

    try:
        while True:
            try:
                raw_message = await asyncio.wait_for(websocket.receive_text(), timeout=RECEIVE_TIMEOUT)
            except asyncio.TimeoutError:
                logger.info(f"Connection timeout for user: {user_id}")
                break

            now = loop.time()
            message_timestamps[:] = [t for t in message_timestamps if now - t < RATE_LIMIT_WINDOW]
            if len(message_timestamps) >= RATE_LIMIT_MESSAGES:
                logger.warning(f"Rate limit exceeded for user {user_id}")
                await websocket.send_json({
                    "type": "error",
                    "data": {"error": "RATE_LIMIT", "message": "Too many messages, slow down"},
                })
                continue
            message_timestamps.append(now)

            if len(raw_message) > settings.ws_max_message_size:
                await websocket.send_json({
                    "type": "error",
                    "data": {
                        "error": "MESSAGE_TOO_LARGE",
                        "message": f"Message exceeds maximum size of {settings.ws_max_message_size} bytes",
                    },
                })
                continue

            try:
                data = json.loads(raw_message)
            except json.JSONDecodeError:
                await websocket.send_json({
                    "type": "error",
                    "data": {"error": "INVALID_JSON", "message": "Invalid JSON format"},
                })
                continue

            await route_incoming_message(connection, data, channel_authorizer=check_channel_access)

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnect for user: {user_id}")
    except Exception as e:
        logger.error(f"WebSocket exception for user {user_id}: {e}")
    finally:
        ping_task.cancel()
        try:
            await ping_task
        except asyncio.CancelledError:
            pass
        await manager.disconnect(websocket)
