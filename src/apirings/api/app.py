"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apirings import __version__
from apirings.config import get_settings
from apirings.registry import ClassificationRegistry


# Registry instance served by the API
_registry: Optional[ClassificationRegistry] = None


def get_registry() -> ClassificationRegistry:
    """Get the served registry, building it from settings on first use."""
    global _registry
    if _registry is None:
        from apirings.dataset import build_registry
        _registry = build_registry(get_settings())
    return _registry


def set_registry(registry: ClassificationRegistry) -> None:
    """Serve an already built registry."""
    global _registry
    _registry = registry


def reset_registry() -> None:
    """Reset the served registry (for testing)."""
    global _registry
    _registry = None


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="apirings",
        description="Read-only ring/layer classification queries for CPython's API",
        version=__version__,
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url="/redoc" if settings.enable_docs else None,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    from apirings.api.routes import router
    app.include_router(router)

    @app.on_event("startup")
    async def startup_event():
        """Load and seal the registry before serving."""
        get_registry()

    return app
