from __future__ import annotations

from fastapi import APIRouter, Depends

from crm.dependencies import get_current_workspace
from crm.routers.errors import to_http_exception
from crm.schemas.property import PropertyRecord
from crm.schemas.search import SearchRequest
from crm.services.workspace_service import Workspace
from crm.utils.exceptions import CrmError

router = APIRouter(prefix="/search")


@router.post("", response_model=list[PropertyRecord])
async def search_properties(
    body: SearchRequest,
    workspace: Workspace = Depends(get_current_workspace),
) -> list[PropertyRecord]:
    try:
        return await workspace.search(body.query)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.post("/reset", response_model=list[PropertyRecord])
async def reset_search(
    workspace: Workspace = Depends(get_current_workspace),
) -> list[PropertyRecord]:
    return workspace.reset_search()
