"""FastAPI application for the Paperless bridge."""

from fastapi import FastAPI

from . import __version__
from .api.health import router as health_router
from .api.processing import router as processing_router
from .core.config import get_settings
from .core.logging import setup_logging


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(
        title="Paperless Bridge API",
        description="Archives bookmarked PDFs in Paperless and returns their text",
        version=__version__
    )
    app.include_router(health_router)
    app.include_router(processing_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    settings = get_settings()

    uvicorn.run(
        "paperless_bridge.main:app",
        host=settings.paperless_helper_host,
        port=settings.paperless_helper_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower()
    )
