"""Shared fixtures: an in-memory store, a page surface and a started controller."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from carvault.catalog.controller import CatalogController
from carvault.catalog.surface import PageSurface
from carvault.config import Settings
from carvault.main import create_app

from .helpers import COLLECTION, FIXED_NOW, FlakyDocumentStore


@pytest_asyncio.fixture
async def store() -> FlakyDocumentStore:
    backend = FlakyDocumentStore()
    await backend.connect()
    return backend


@pytest.fixture
def surface() -> PageSurface:
    return PageSurface()


@pytest_asyncio.fixture
async def controller(store: FlakyDocumentStore, surface: PageSurface) -> CatalogController:
    ctrl = CatalogController(store, surface, COLLECTION, clock=lambda: FIXED_NOW)
    await ctrl.start(timeout=1.0)
    return ctrl


@pytest_asyncio.fixture
async def client(store: FlakyDocumentStore):
    app = create_app(Settings(store_ready_timeout=1.0, collection_name=COLLECTION), store=store)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
