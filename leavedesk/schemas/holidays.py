import datetime as dt
from uuid import UUID

from pydantic import BaseModel, Field

from leavedesk.models.holiday import HOLIDAY_TYPES


class HolidayCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    type: str = Field(default="public", pattern=f"^({'|'.join(HOLIDAY_TYPES)})$")


class HolidayResponse(BaseModel):
    id: UUID
    name: str
    date: dt.date
    type: str
    created_at: dt.datetime

    model_config = {"from_attributes": True}
