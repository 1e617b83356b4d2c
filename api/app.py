"""
FastAPI Application

Main application setup and configuration.

Usage:
    uvicorn api.app:app --reload

    # Or run directly
    python -m api.app
"""

import logging

from fastapi import FastAPI

from api.routes import health, upload, download, delete, proof, files
from api.deps import build_store
from api.errors import APIError, api_error_handler, segproof_error_handler, generic_error_handler
from core.config.runtime import RuntimeConfig, get_default_config
from core.schemas.errors import SegproofException
from core.storage.segment_store import SegmentStore


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    config: RuntimeConfig | None = None,
    store: SegmentStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or get_default_config()

    app = FastAPI(
        title="Segment Proof Store API",
        description="""
HTTP API for storing file segments and proving their membership.

## Endpoints

- **POST /upload/{filename}** - Store one segment (multipart field `file`)
- **GET /download/{filename}/{segment_name}** - Fetch a stored segment
- **DELETE /delete/{filename}** - Remove a file and all its segments
- **GET /requestProof/{filename}/{segment_index}** - Merkle proof for a segment
- **POST /verifyProof** - Check a proof against a root
- **GET /list** - List stored files
- **GET /health** - Health check

Segments are indexed in upload order; that index identifies a segment
when requesting a proof.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.store = store or build_store(config)

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(SegproofException, segproof_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(upload.router)
    app.include_router(download.router)
    app.include_router(delete.router)
    app.include_router(proof.router)
    app.include_router(files.router)

    return app


def run_server(config: RuntimeConfig | None = None) -> None:
    """Run the API with uvicorn using the configured bind address."""
    import uvicorn

    config = config or get_default_config()
    configure_logging(config.log_level)
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)


configure_logging(get_default_config().log_level)

# Create the application instance
app = create_app()


if __name__ == "__main__":
    run_server()
