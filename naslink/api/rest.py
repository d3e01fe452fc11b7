"""
HTTP Download Server

Design Decision: API Framework
==============================

Options Considered:
1. FastAPI - Async, FileResponse streaming, lifespan hooks
2. Flask - Simple, but sync-focused
3. http.server - No streaming helpers, no lifespan

Decision: FastAPI
- The store (aiosqlite) and hasher (aiofiles) are async already
- FileResponse streams from disk and sets Content-Disposition
- Same stack as the rest of the tooling

Routes:
- GET /                 landing page
- GET /favicon.ico      static asset (if present in assets dir)
- GET /logo.png         static asset (if present in assets dir)
- GET /{identifier}     download, or 404 "link invalid" page

Every failure on the download route degrades to the 404 page so one
bad request never takes the server down.
"""

import logging
from contextlib import asynccontextmanager

import aiofiles.os
from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, HTMLResponse, Response

from ..errors import NotFoundError
from ..resolver import LandingPage, RequestInfo
from ..service import NasLinkService
from .pages import INDEX_PAGE, INVALID_PAGE

logger = logging.getLogger(__name__)

STATIC_ASSETS = ("favicon.ico", "logo.png")


def request_info(request: Request) -> RequestInfo:
    """Extract caller metadata for the audit log."""
    return RequestInfo(
        method=request.method,
        user_agent=request.headers.get("user-agent", "-"),
        remote_addr=request.client.host if request.client else "-",
        forwarded_for=request.headers.get("x-forwarded-for"),
    )


def not_found() -> HTMLResponse:
    return HTMLResponse(INVALID_PAGE, status_code=404)


def create_app(service: NasLinkService) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: NasLinkService to resolve identifiers against

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the store on startup, close it on shutdown."""
        await service.start()
        logger.info("naslink server starting...")
        yield
        logger.info("naslink server stopping...")
        await service.stop()

    app = FastAPI(
        title="naslink",
        description="Serve registered files under unguessable links",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.service = service

    # === Endpoints ===

    @app.api_route("/", methods=["GET", "HEAD"], response_class=HTMLResponse)
    async def index():
        return HTMLResponse(INDEX_PAGE)

    def add_asset_route(asset: str):
        async def static_asset():
            asset_path = service.config.images_dir / asset
            if not asset_path.is_file():
                return Response(status_code=404)
            return FileResponse(asset_path)

        app.add_api_route(f"/{asset}", static_asset, methods=["GET", "HEAD"],
                          include_in_schema=False)

    for asset in STATIC_ASSETS:
        add_asset_route(asset)

    @app.api_route("/{identifier:path}", methods=["GET", "HEAD"])
    async def download(identifier: str, request: Request):
        """Serve the file behind a naslink."""
        info = request_info(request)

        try:
            decision = await service.resolve(identifier, info)
        except NotFoundError:
            return not_found()
        except Exception as e:
            logger.error(f"Error resolving {identifier!r}: {e}", exc_info=True)
            return not_found()

        if isinstance(decision, LandingPage):
            return HTMLResponse(INDEX_PAGE)

        try:
            stat = await aiofiles.os.stat(decision.path)
        except OSError:
            # File vanished between verification and send
            await service.invalidate(decision, info)
            return not_found()

        return FileResponse(
            decision.path,
            stat_result=stat,
            filename=decision.filename,
            content_disposition_type="attachment",
            media_type="application/octet-stream",
        )

    return app


async def run_api_server(service: NasLinkService, host: str = "0.0.0.0", port: int = 8080):
    """
    Run the download server.

    Args:
        service: NasLinkService instance
        host: Host to bind to
        port: Port to listen on
    """
    import uvicorn

    app = create_app(service)

    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=service.config.log_level.lower(),
    )
    server = uvicorn.Server(config)
    await server.serve()
