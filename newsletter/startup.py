"""Application Startup - FastAPI app factory and uvicorn server wiring.

Invariants:
    - Exactly two routes: GET /health_check and POST /subscriptions
    - The pool handle is passed in by the caller and stored on app.state;
      the app never creates or disposes it
    - The server listens on a socket bound by the caller (port 0 → ephemeral)
    - uvicorn's logging config is disabled; setup_logging governs output
"""

import logging
import socket
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from newsletter.api.error_handlers import register_error_handlers
from newsletter.api.routes import health, subscriptions
from newsletter.infrastructure.database import DatabaseSessionManager
from newsletter.infrastructure.observability import RequestIdMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    logger.info("Newsletter API started")
    yield
    logger.info("Newsletter API shutting down")


def create_app(db_manager: DatabaseSessionManager) -> FastAPI:
    """Build the application around an existing pool handle."""
    app = FastAPI(title="Newsletter API", version="0.1.0", lifespan=lifespan)
    app.state.db_manager = db_manager

    app.add_middleware(RequestIdMiddleware)

    # Routes - explicit registration
    app.include_router(health.router)
    app.include_router(subscriptions.router)

    register_error_handlers(app)
    return app


def bind_listener(host: str = "127.0.0.1", port: int = 0) -> socket.socket:
    """Bind a TCP listener; port 0 asks the OS for a free port."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    sock.setblocking(False)
    return sock


def build_server(
    listener: socket.socket,
    db_manager: DatabaseSessionManager,
    log_level: str = "info",
) -> uvicorn.Server:
    """Return a server handle; run it with ``await server.serve(sockets=[listener])``."""
    config = uvicorn.Config(
        create_app(db_manager),
        log_config=None,
        log_level=log_level.lower(),
        access_log=False,
        lifespan="on",
    )
    server = uvicorn.Server(config)
    host, port = listener.getsockname()[:2]
    logger.info(f"Listening on http://{host}:{port}")
    return server


async def run(
    listener: socket.socket,
    db_manager: DatabaseSessionManager,
    log_level: str = "info",
) -> None:
    """Serve until the process is stopped."""
    server = build_server(listener, db_manager, log_level)
    await server.serve(sockets=[listener])
