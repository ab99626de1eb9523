from __future__ import annotations

import logging
from collections.abc import AsyncGenerator  # noqa: TC003
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crm.config import settings
from crm.routers import appointments, customers, health, properties, search, workspace
from crm.services.workspace_service import close_all_workspaces
from crm.store.factory import get_document_store, reset_document_store
from crm.utils.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logging.basicConfig(level=settings.log_level.upper())
    try:
        get_document_store()
    except StoreUnavailableError:
        # Reported once here; every data request then answers 503.
        logger.error("Starting without a document store")
    yield
    close_all_workspaces()
    reset_document_store()


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(workspace.router, prefix=settings.api_prefix, tags=["workspace"])
app.include_router(properties.router, prefix=settings.api_prefix, tags=["properties"])
app.include_router(customers.router, prefix=settings.api_prefix, tags=["customers"])
app.include_router(
    appointments.router, prefix=settings.api_prefix, tags=["appointments"]
)
app.include_router(search.router, prefix=settings.api_prefix, tags=["search"])
