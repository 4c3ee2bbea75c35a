import logging

import socketio
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.friends.router import router as friends_router
from app.api.health.router import router as health_router
from app.api.notifications.router import router as notifications_router
from app.api.profile.router import router as profile_router
from app.core.config import settings
from app.core.exceptions import AppError
from app.websocket.websocket_manager import sio

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Solinarium API: friends and notifications for homeschooling families",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(friends_router)
app.include_router(health_router)
app.include_router(notifications_router)
app.include_router(profile_router)

socket_app = socketio.ASGIApp(sio, app)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.info("%s %s -> %s (%s)", request.method, request.url.path, exc.status_code, exc.code)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "code": exc.code
        }
    )


@app.exception_handler(500)
async def server_error_handler(request: Request, exc: Exception):
    logger.error(f"Server error: {str(exc)}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Server error",
            "code": "server_error"
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unexpected error: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "code": "server_error"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        socket_app,
        host="127.0.0.1",
        port=8000,
        log_level="info",
    )
