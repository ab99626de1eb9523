from __future__ import annotations

from fastapi import APIRouter, Depends

from crm.dependencies import get_current_workspace
from crm.schemas.workspace import NotificationResponse, WorkspaceStateResponse
from crm.services.workspace_service import Workspace

router = APIRouter()


@router.get("/state", response_model=WorkspaceStateResponse)
async def get_state(
    workspace: Workspace = Depends(get_current_workspace),
) -> WorkspaceStateResponse:
    state = workspace.state
    notification = workspace.notifier.current()
    return WorkspaceStateResponse(
        user_id=workspace.user_id,
        loading=state.loading,
        property_count=len(state.properties),
        filtered_count=len(state.filtered_properties),
        customer_count=len(state.customers),
        appointment_count=len(state.appointments),
        search_query=state.search_query,
        property_draft=state.property_draft,
        customer_draft=state.customer_draft,
        appointment_draft=state.appointment_draft,
        notification=(
            NotificationResponse.model_validate(notification) if notification else None
        ),
    )


@router.get("/notifications/current", response_model=NotificationResponse | None)
async def get_current_notification(
    workspace: Workspace = Depends(get_current_workspace),
) -> NotificationResponse | None:
    notification = workspace.notifier.current()
    if notification is None:
        return None
    return NotificationResponse.model_validate(notification)
