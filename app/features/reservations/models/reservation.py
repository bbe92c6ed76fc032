import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class ReservationStatus(enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"


class Reservation(BaseModel):
    __tablename__ = "reservations"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_name = Column(String(255), nullable=False)
    project_image_url = Column(String(1024), nullable=True)
    reserved_for = Column(DateTime(timezone=True), nullable=False)
    guests = Column(Integer, default=1, nullable=False)
    notes = Column(Text, nullable=True)
    status = Column(Enum(ReservationStatus), default=ReservationStatus.confirmed, nullable=False)

    user = relationship("User")

    def __repr__(self):
        return f"<Reservation(id={self.id}, user_id={self.user_id}, project={self.project_name})>"
