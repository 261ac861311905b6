"""Main FastAPI application for the taskhub project/task tracking service."""
import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime, timezone
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from taskhub import __version__
from taskhub.errors import NotFoundError, StoreError, ValidationError
from taskhub.mcp.server import PROTOCOL_VERSION
from taskhub.mcp.stdio import serve_stdio
from taskhub.mcp.tools import build_mcp_server
from taskhub.middleware.cors import add_cors_middleware
from taskhub.routers import mcp_router, projects_router, tasks_router
from taskhub.services.persistence import build_persister_from_env
from taskhub.services.store import TaskStore
from taskhub.utils.logger import setup_logging

load_dotenv()

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def attach_store(app: FastAPI, store: TaskStore) -> None:
    """Bind a store, and an MCP server over it, to the application."""
    app.state.store = store
    app.state.mcp_server = build_mcp_server(store)


def create_app(store: Optional[TaskStore] = None) -> FastAPI:
    """
    Build the application.

    When ``store`` is omitted the startup hook builds one from the environment
    and loads the persisted snapshot into it.
    """
    app = FastAPI(
        title="taskhub",
        description="Project and task tracking over MCP (JSON-RPC) and REST",
        version=__version__,
    )
    app.state.store = None
    app.state.mcp_server = None

    add_cors_middleware(app)

    if store is not None:
        attach_store(app, store)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "code": exc.code, "details": exc.details},
        )

    @app.on_event("startup")
    async def startup_event():
        """Create the store and load persisted state on startup."""
        if app.state.store is None:
            new_store = TaskStore(persister=build_persister_from_env())
            new_store.load_initial_state()
            attach_store(app, new_store)

        stats = app.state.store.stats()
        logger.info(
            f"taskhub {__version__} ready: {stats['projects_count']} projects, "
            f"{stats['tasks_count']} tasks, tools={app.state.mcp_server.list_tools()}"
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Flush the final state before the process exits."""
        if app.state.store is not None:
            app.state.store.flush()
            logger.info("taskhub state flushed on shutdown")

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        stats = app.state.store.stats() if app.state.store is not None else {}
        sessions = len(app.state.mcp_server.sessions) if app.state.mcp_server is not None else 0
        return {
            "status": "healthy",
            "version": __version__,
            **stats,
            "sessions": sessions,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/")
    async def root():
        """Root endpoint - server info."""
        tools = app.state.mcp_server.get_tool_schemas() if app.state.mcp_server is not None else []
        return {
            "name": "taskhub",
            "version": __version__,
            "protocol": f"MCP {PROTOCOL_VERSION}",
            "endpoints": {
                "mcp": "/mcp",
                "tools": "/tools",
                "projects": "/api/projects",
                "tasks": "/api/tasks",
                "health": "/health",
                "docs": "/docs",
            },
            "tools": [{"name": t["name"], "description": t["description"]} for t in tools],
        }

    app.include_router(mcp_router)  # MCP endpoints: /mcp, /tools
    app.include_router(projects_router, prefix="/api")  # Project endpoints: /api/projects
    app.include_router(tasks_router, prefix="/api")  # Task endpoints: /api/tasks

    return app


setup_logging()
app = create_app()


def run_stdio(store: Optional[TaskStore] = None, stdin=None, stdout=None) -> int:
    """Serve the MCP tools over stdin/stdout; logs go to stderr."""
    setup_logging(stream=sys.stderr)
    if store is None:
        store = TaskStore(persister=build_persister_from_env())
        store.load_initial_state()
    try:
        return asyncio.run(serve_stdio(build_mcp_server(store), stdin or sys.stdin, stdout or sys.stdout))
    finally:
        store.flush()


def cli(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="taskhub", description="Project and task tracking MCP server")
    parser.add_argument("--stdio", action="store_true", help="Serve MCP over stdin/stdout instead of HTTP")
    args = parser.parse_args(argv)

    if args.stdio:
        run_stdio()
        return

    import uvicorn
    uvicorn.run(
        "taskhub.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "8000")),
    )


if __name__ == "__main__":
    cli()
