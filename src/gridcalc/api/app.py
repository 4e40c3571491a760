"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..config import settings
from ..store import CellStore
from ..table import TableService
from .routes import router

# Global service instance
_service: Optional[TableService] = None


def get_service() -> TableService:
    """Get the global table service instance."""
    global _service
    if _service is None:
        _service = TableService(
            CellStore(settings.database_path),
            honor_root=settings.honor_sqrt_root,
            max_formula_length=settings.max_formula_length,
        )
    return _service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    service = get_service()
    await service.store.initialize()
    yield
    # Shutdown
    await service.store.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="gridcalc",
        description="Spreadsheet grid backend with formula evaluation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API routes
    app.include_router(router, prefix="/api")

    return app
