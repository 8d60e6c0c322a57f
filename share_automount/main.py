import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from .api import bookmarks, uiactions, websockets
from .dependencies import (
    get_event_bus,
    get_mount_controller,
    get_presentation_event_handlers,
    get_settings,
    get_websocket_manager,
)
from .logging_config import setup_logging
from .presentation.registration import register_presentation_domain


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    settings = get_settings()
    setup_logging(settings)

    config_info = settings.config_file_info
    logging.info(f"Configuration loaded from: {config_info['active_config_file']}")
    logging.info(f"Running on hostname: {config_info['hostname']}")
    if len(config_info["all_available_configs"]) > 1:
        logging.info(f"Available config files: {', '.join(config_info['all_available_configs'])}")

    logging.info("Share Automount starting up...")
    logging.info(f"Bookmarks file: {settings.bookmarks_path}")
    logging.info(f"Symlink base directory: {settings.mount_base_path}")

    websocket_manager = get_websocket_manager()
    websocket_manager.start_sender_task()
    await register_presentation_domain(get_event_bus(), get_presentation_event_handlers())

    controller = get_mount_controller()
    await controller.start()

    yield

    # Shutdown
    logging.info("Share Automount shutting down...")
    await controller.destroy()
    websocket_manager.stop_sender_task()
    logging.info("Mount controller stopped")


app = FastAPI(
    title="Share Automount",
    description="Keeps bookmarked network shares mounted and linked under a stable directory",
    version="0.1.0",
    lifespan=lifespan,
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    logging.info(
        f"Incoming request: {request.method} {request.url.path}",
        extra={
            "operation": "http_request",
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        },
    )

    response = await call_next(request)

    logging.info(
        f"Response: {response.status_code}",
        extra={
            "operation": "http_response",
            "status_code": response.status_code,
            "path": request.url.path,
        },
    )

    return response


app.include_router(uiactions.router)
app.include_router(bookmarks.router)
app.include_router(websockets.router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "message": "Share Automount is running"}


@app.get("/health")
async def health():
    """Detailed health check."""
    controller = get_mount_controller()
    return {
        "status": "healthy",
        "service": "share-automount",
        "controller_running": controller.is_running,
        "bookmarks": len(controller.bookmarks),
    }


def run():
    uvicorn.run("share_automount.main:app", host="127.0.0.1", port=8000, reload=False, log_level="info")


if __name__ == "__main__":
    run()
