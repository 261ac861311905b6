"""CORS configuration for browser-based and MCP clients."""
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

logger = logging.getLogger(__name__)

# MCP clients send and read these in addition to the usual headers
MCP_HEADERS = ["MCP-Protocol-Version", "Mcp-Session-Id"]


def get_allowed_origins() -> list[str]:
    """Development origins plus FRONTEND_URL when provided."""
    frontend_url = os.environ.get("FRONTEND_URL", "http://localhost:3000")
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    if frontend_url and frontend_url not in origins:
        origins.append(frontend_url)
    return origins


def add_cors_middleware(app):
    """Add CORS middleware to the FastAPI application."""
    environment = os.environ.get("ENVIRONMENT", "development")
    allowed_origins = get_allowed_origins()

    if environment == "production":
        logger.info(f"[CORS] Production CORS restricted to: {allowed_origins}")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type", "Accept", "Authorization", "Origin", *MCP_HEADERS],
            expose_headers=MCP_HEADERS,
        )
    else:
        logger.info("[CORS] Development CORS allowing all origins")
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=MCP_HEADERS,
        )
