from __future__ import annotations

from fastapi import Depends, Header, HTTPException

from crm.auth import resolve_user_id
from crm.llm.base import LLMProvider
from crm.llm.factory import get_llm_provider
from crm.services.workspace_service import Workspace, get_workspace
from crm.store.base import DocumentStore
from crm.store.factory import get_document_store
from crm.utils.exceptions import AuthenticationError, StoreUnavailableError


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    try:
        return resolve_user_id(x_user_id)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e


def get_store() -> DocumentStore:
    try:
        return get_document_store()
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


async def get_current_workspace(
    user_id: str = Depends(get_current_user_id),
    store: DocumentStore = Depends(get_store),
    llm: LLMProvider = Depends(get_llm_provider),
) -> Workspace:
    # async so that subscriptions are opened on the event loop thread
    return get_workspace(user_id, store, llm)
