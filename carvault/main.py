# carvault/main.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from .catalog import catalog_router
from .catalog.controller import CatalogController
from .catalog.surface import PageSurface
from .config import Settings, get_settings
from .exceptions import StoreNotReadyError
from .logging_config import setup_logging
from .storage import DocumentStore, build_store


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings)
        # An injected store signals readiness on its own schedule
        backend = store
        if backend is None:
            backend = build_store(settings.store_backend, settings.store_path)
            await backend.connect()
        controller = CatalogController(backend, PageSurface(), settings.collection_name)
        try:
            await controller.start(settings.store_ready_timeout)
        except StoreNotReadyError:
            logger.error("Document store never became ready; aborting startup")
            raise
        app.state.controller = controller
        logger.info("%s %s ready", settings.app_title, settings.app_version)
        yield

    app = FastAPI(
        title=settings.app_title,
        description="Vehicle inventory: list, filter, search, add, edit and remove vehicles.",
        version=settings.app_version,
        lifespan=lifespan,
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        controller: CatalogController = request.app.state.controller
        return HTMLResponse(
            controller.surface.render_page(
                settings.app_title, controller.current_filter, controller.search_term
            )
        )

    app.include_router(catalog_router)
    return app


app = create_app()
