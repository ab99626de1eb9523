from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from crm.schemas.appointment import AppointmentRecord
from crm.schemas.customer import CustomerRecord
from crm.schemas.property import PropertyRecord


class NotificationResponse(BaseModel):
    message: str
    level: str
    expires_at: datetime

    model_config = {"from_attributes": True}


class WorkspaceStateResponse(BaseModel):
    user_id: str
    loading: bool
    property_count: int
    filtered_count: int
    customer_count: int
    appointment_count: int
    search_query: str
    property_draft: PropertyRecord
    customer_draft: CustomerRecord
    appointment_draft: AppointmentRecord
    notification: NotificationResponse | None = None
