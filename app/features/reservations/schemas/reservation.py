from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.features.reservations.models.reservation import ReservationStatus


class ReservationCreate(BaseModel):
    project_name: str = Field(..., min_length=1, max_length=255)
    project_image_url: Optional[str] = Field(None, max_length=1024)
    reserved_for: datetime
    guests: int = Field(1, ge=1, le=100)
    notes: Optional[str] = None


class ReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    project_name: str
    project_image_url: Optional[str] = None
    reserved_for: datetime
    guests: int
    notes: Optional[str] = None
    status: ReservationStatus
    created_at: datetime
