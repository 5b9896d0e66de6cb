"""FastAPI main application."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from folderbridge import __version__
from folderbridge.api.routers import folders, tools
from folderbridge.bootstrap import bootstrap
from folderbridge.config import Settings, settings as default_settings
from folderbridge.runtime.bridge import FolderBridge

logger = structlog.get_logger()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one FolderBridge."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        bootstrap(settings)
        logger.info(
            "folderbridge_startup",
            host=settings.api_host,
            port=settings.api_port,
            reload=settings.api_reload,
            state_root=str(settings.state_root),
        )
        bridge = FolderBridge.from_settings(settings)
        await bridge.load()
        app.state.bridge = bridge
        yield
        # Shutdown
        logger.info("folderbridge_shutdown")

    app = FastAPI(
        title="FolderBridge",
        description="Assistant file tools over user-granted local folders",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Return concise request validation details."""
        return JSONResponse(
            status_code=422,
            content={
                "detail": "Request validation failed",
                "errors": [
                    {
                        "field": " -> ".join(str(part) for part in err.get("loc", [])),
                        "type": err.get("type", "unknown"),
                        "msg": err.get("msg", "validation error"),
                    }
                    for err in exc.errors()
                ],
            },
        )

    # Routers
    app.include_router(folders.router, prefix="/api/v1")
    app.include_router(tools.router, prefix="/api/v1")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "state_root": str(settings.state_root)}

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": "FolderBridge",
            "version": __version__,
            "description": "Assistant file tools over user-granted local folders",
        }

    return app


app = create_app()
