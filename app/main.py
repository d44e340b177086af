"""
FastAPI application entry point.

Configures logging, middleware, routes, exception handlers and the
real-time notification components.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.dispatcher import NotificationDispatcher
from app.core.presence import PresenceRegistry
from app.core.websocket import ConnectionGateway

logger = logging.getLogger(__name__)


def init_realtime(app: FastAPI) -> None:
    """
    Build the presence registry, gateway and dispatcher for this app.
    Both the gateway and the dispatcher share the one registry.
    """
    registry = PresenceRegistry()
    gateway = ConnectionGateway(registry)
    app.state.presence = registry
    app.state.gateway = gateway
    app.state.dispatcher = NotificationDispatcher(registry, gateway)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_realtime(app)
    logger.info("Starting OnePost API in %s mode", settings.ENVIRONMENT)
    yield
    await app.state.gateway.drain()
    logger.info("Shutting down OnePost API")


app = FastAPI(
    title="OnePost API",
    description="Blogging platform with real-time notifications",
    version="1.0.0",
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    if settings.DEBUG:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": str(exc),
                    "type": type(exc).__name__,
                }
            },
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "version": "1.0.0",
    }


from app.routers import comments, likes, notifications, posts, users, websocket

app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])
app.include_router(comments.router, prefix="/api/comments", tags=["Comments"])
app.include_router(likes.router, prefix="/api/likes", tags=["Likes"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(websocket.router, prefix="/api", tags=["WebSocket"])
