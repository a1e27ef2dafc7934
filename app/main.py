"""
Empire word game server.

Builds the FastAPI application: middleware stack, rate limiting, the game
router, and (when present) the static frontend. Run directly for a local
party on the LAN, or point uvicorn at ``main:app``.
"""

import os
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from commons import get_local_ip, get_player_url, limiter
from configs.config import get_config
from logging_config import setup_logging
from security import (
    RequestIdMiddleware,
    SecurityHeadersMiddleware,
    http_exception_handler,
    validation_exception_handler,
)
from src.game.manager import SessionManager
from src.routes import game_routes

# ── Logging ──────────────────────────────────────────────────────────────────
setup_logging()
logger = logging.getLogger(__name__)

cfg = get_config()


# ── App Factory ──────────────────────────────────────────────────────────────
def create_app(manager: Optional[SessionManager] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        manager: Optional SessionManager (a fresh one is created if omitted)

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Empire Word Game API",
        docs_url="/docs" if cfg.DOCS_ENABLED else None,
        redoc_url="/redoc" if cfg.DOCS_ENABLED else None,
        openapi_url="/openapi.json" if cfg.DOCS_ENABLED else None,
    )
    app.state.limiter = limiter
    app.state.session_manager = manager or SessionManager()

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(
        RequestValidationError, validation_exception_handler
    )

    # ── Middleware Stack (last added is outermost) ───────────────────────────
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=cfg.ALLOWED_HOSTS)
    if cfg.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cfg.CORS_ORIGINS,
            allow_credentials=False,
            allow_methods=cfg.CORS_METHODS,
            allow_headers=cfg.CORS_HEADERS,
        )
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        ProxyHeadersMiddleware, trusted_hosts=cfg.FORWARDED_ALLOW_IPS
    )

    app.include_router(game_routes.router)

    # Mounted last so the API routes take precedence over "/"
    if os.path.isdir(cfg.PUBLIC_DIR):
        app.mount(
            "/", StaticFiles(directory=cfg.PUBLIC_DIR, html=True),
            name="public",
        )
        logger.info("Serving frontend from %s", cfg.PUBLIC_DIR)
    else:
        logger.info("No frontend at %s; serving the API only", cfg.PUBLIC_DIR)

    return app


app = create_app()


def log_banner(port: int, scheme: str = "http") -> None:
    """Print where the host and the players should point their browsers."""
    logger.info("═══════════════════════════════════════════")
    logger.info("  Empire Game Server")
    logger.info("═══════════════════════════════════════════")
    if cfg.RENDER_EXTERNAL_URL:
        logger.info("  Live at: %s", cfg.RENDER_EXTERNAL_URL)
    else:
        logger.info("  Host (you):   %s://localhost:%d?host=true", scheme, port)
        logger.info("  Players:      %s", get_player_url())
        logger.info("  LAN address:  %s", get_local_ip())
    logger.info("═══════════════════════════════════════════")


# ═══════════════════════════════════════════════════════════════════════════
#  ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import uvicorn
    import argparse

    parser = argparse.ArgumentParser(description="Run the Empire game server")
    parser.add_argument("--host", default=cfg.HOST, help=f"Host to bind to (default: {cfg.HOST})")
    parser.add_argument("--port", type=int, default=cfg.PORT, help=f"Port to bind to (default: {cfg.PORT})")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload on code changes")
    parser.add_argument("--cert-file", default=None, help="Path to SSL certificate file (enables HTTPS)")
    parser.add_argument("--key-file", default=None, help="Path to SSL private key file (required with --cert-file)")

    args = parser.parse_args()

    # Validate SSL configuration
    if (args.cert_file and not args.key_file) or (args.key_file and not args.cert_file):
        logger.error("Both --cert-file and --key-file must be provided together")
        exit(1)

    # Shared config namespace; the environment variable covers --reload,
    # which re-imports the app in a child process.
    cfg.PORT = args.port
    os.environ["PORT"] = str(args.port)

    scheme = "https" if args.cert_file else "http"
    log_banner(args.port, scheme)

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
        ssl_certfile=args.cert_file,
        ssl_keyfile=args.key_file,
    )
