from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Response, UploadFile

from crm.config import settings
from crm.dependencies import get_current_workspace
from crm.routers.errors import to_http_exception
from crm.schemas.property import AnalyzeRequest, ImportResult, PropertyRecord, ShareLinks
from crm.services.spreadsheet_service import XLSX_MEDIA_TYPE
from crm.services.workspace_service import Workspace
from crm.utils.exceptions import CrmError
from crm.utils.file_handling import validate_spreadsheet

router = APIRouter(prefix="/properties")


@router.get("", response_model=list[PropertyRecord])
async def list_properties(
    workspace: Workspace = Depends(get_current_workspace),
) -> list[PropertyRecord]:
    return workspace.state.properties


@router.get("/filtered", response_model=list[PropertyRecord])
async def list_filtered_properties(
    workspace: Workspace = Depends(get_current_workspace),
) -> list[PropertyRecord]:
    return workspace.state.filtered_properties


@router.get("/draft", response_model=PropertyRecord)
async def get_property_draft(
    workspace: Workspace = Depends(get_current_workspace),
) -> PropertyRecord:
    return workspace.state.property_draft


@router.patch("/draft", response_model=PropertyRecord)
async def update_property_draft(
    values: dict[str, Any] = Body(...),
    workspace: Workspace = Depends(get_current_workspace),
) -> PropertyRecord:
    try:
        return workspace.update_property_draft(values)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.delete("/draft", response_model=PropertyRecord)
async def clear_property_draft(
    workspace: Workspace = Depends(get_current_workspace),
) -> PropertyRecord:
    workspace.state.clear_property_draft()
    return workspace.state.property_draft


@router.post("/draft/analyze", response_model=PropertyRecord)
async def analyze_property_text(
    body: AnalyzeRequest,
    workspace: Workspace = Depends(get_current_workspace),
) -> PropertyRecord:
    try:
        return await workspace.analyze_property_text(body.text)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.post("/draft/submit", response_model=PropertyRecord)
async def submit_property(
    workspace: Workspace = Depends(get_current_workspace),
) -> PropertyRecord:
    try:
        return await workspace.submit_property()
    except CrmError as e:
        raise to_http_exception(e) from e


@router.post("/import", response_model=ImportResult)
async def import_properties(
    file: UploadFile,
    workspace: Workspace = Depends(get_current_workspace),
) -> ImportResult:
    content = await file.read()
    try:
        validate_spreadsheet(file.filename, len(content))
    except ValueError as e:
        workspace.notifier.warning(str(e))
        raise HTTPException(status_code=400, detail=str(e)) from e
    try:
        imported = await workspace.import_spreadsheet(file.filename or "", content)
    except CrmError as e:
        raise to_http_exception(e) from e
    return ImportResult(imported=imported)


@router.get("/export")
async def export_properties(
    workspace: Workspace = Depends(get_current_workspace),
) -> Response:
    try:
        content = workspace.export_spreadsheet()
    except CrmError as e:
        raise to_http_exception(e) from e
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{settings.export_filename}"'
        },
    )


@router.post("/{property_id}/edit", response_model=PropertyRecord)
async def edit_property(
    property_id: str,
    workspace: Workspace = Depends(get_current_workspace),
) -> PropertyRecord:
    try:
        return workspace.edit_property(property_id)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.delete("/{property_id}")
async def delete_property(
    property_id: str,
    workspace: Workspace = Depends(get_current_workspace),
) -> dict:
    try:
        await workspace.delete_property(property_id)
    except CrmError as e:
        raise to_http_exception(e) from e
    return {"message": "Property deleted"}


@router.get("/{property_id}/share", response_model=ShareLinks)
async def share_property(
    property_id: str,
    page_url: str | None = None,
    workspace: Workspace = Depends(get_current_workspace),
) -> ShareLinks:
    try:
        return workspace.share_links(property_id, page_url)
    except CrmError as e:
        raise to_http_exception(e) from e
