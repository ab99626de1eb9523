from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from crm.dependencies import get_current_workspace
from crm.routers.errors import to_http_exception
from crm.schemas.appointment import AppointmentRecord, AppointmentView
from crm.services.workspace_service import Workspace
from crm.utils.exceptions import CrmError

router = APIRouter(prefix="/appointments")


@router.get("", response_model=list[AppointmentView])
async def list_appointments(
    workspace: Workspace = Depends(get_current_workspace),
) -> list[AppointmentView]:
    return workspace.appointment_views()


@router.get("/draft", response_model=AppointmentRecord)
async def get_appointment_draft(
    workspace: Workspace = Depends(get_current_workspace),
) -> AppointmentRecord:
    return workspace.state.appointment_draft


@router.patch("/draft", response_model=AppointmentRecord)
async def update_appointment_draft(
    values: dict[str, Any] = Body(...),
    workspace: Workspace = Depends(get_current_workspace),
) -> AppointmentRecord:
    try:
        return workspace.update_appointment_draft(values)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.delete("/draft", response_model=AppointmentRecord)
async def clear_appointment_draft(
    workspace: Workspace = Depends(get_current_workspace),
) -> AppointmentRecord:
    workspace.state.clear_appointment_draft()
    return workspace.state.appointment_draft


@router.post("/draft/submit", response_model=AppointmentRecord)
async def submit_appointment(
    workspace: Workspace = Depends(get_current_workspace),
) -> AppointmentRecord:
    try:
        return await workspace.submit_appointment()
    except CrmError as e:
        raise to_http_exception(e) from e


@router.post("/{appointment_id}/edit", response_model=AppointmentRecord)
async def edit_appointment(
    appointment_id: str,
    workspace: Workspace = Depends(get_current_workspace),
) -> AppointmentRecord:
    try:
        return workspace.edit_appointment(appointment_id)
    except CrmError as e:
        raise to_http_exception(e) from e


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    workspace: Workspace = Depends(get_current_workspace),
) -> dict:
    try:
        await workspace.delete_appointment(appointment_id)
    except CrmError as e:
        raise to_http_exception(e) from e
    return {"message": "Appointment deleted"}
