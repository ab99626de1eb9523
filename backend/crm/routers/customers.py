from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from crm.dependencies import get_current_workspace
from crm.routers.errors import to_http_exception
from crm.schemas.customer import CustomerRecord
from crm.schemas.property import AnalyzeRequest
from crm.services.workspace_service import Workspace
from crm.utils.exceptions import CrmError

router = APIRouter(prefix="/customers")


@router.get("", response_model=list[CustomerRecord])
async def list_customers(
    workspace: Workspace = Depends(get_current_workspace),
) -> list[CustomerRecord]:
    return workspace.state.customers


@router.get("/draft", response_model=CustomerRecord)
async def get_customer_draft(
    workspace: Workspace = Depends(get_current_workspace),
) -> CustomerRecord:
    return workspace.state.customer_draft


@router.patch("/draft", response_model=CustomerRecord)
async def update_customer_draft(
    values: dict[str, Any] = Body(...),
    workspace: Workspace = Depends(get_current_workspace),
) -> CustomerRecord:
    try:
        return workspace.update_customer_draft(values)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.delete("/draft", response_model=CustomerRecord)
async def clear_customer_draft(
    workspace: Workspace = Depends(get_current_workspace),
) -> CustomerRecord:
    workspace.state.clear_customer_draft()
    return workspace.state.customer_draft


@router.post("/draft/analyze-needs", response_model=CustomerRecord)
async def analyze_customer_needs(
    body: AnalyzeRequest,
    workspace: Workspace = Depends(get_current_workspace),
) -> CustomerRecord:
    try:
        return await workspace.analyze_customer_needs(body.text)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.post("/draft/submit", response_model=CustomerRecord)
async def submit_customer(
    workspace: Workspace = Depends(get_current_workspace),
) -> CustomerRecord:
    try:
        return await workspace.submit_customer()
    except CrmError as e:
        raise to_http_exception(e) from e


@router.post("/{customer_id}/edit", response_model=CustomerRecord)
async def edit_customer(
    customer_id: str,
    workspace: Workspace = Depends(get_current_workspace),
) -> CustomerRecord:
    try:
        return workspace.edit_customer(customer_id)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.delete("/{customer_id}")
async def delete_customer(
    customer_id: str,
    workspace: Workspace = Depends(get_current_workspace),
) -> dict:
    try:
        await workspace.delete_customer(customer_id)
    except CrmError as e:
        raise to_http_exception(e) from e
    return {"message": "Customer deleted"}
