import enum

from sqlalchemy import Boolean, Column, Enum, String, Text

from app.platform.db.base import BaseModel


class PhoneType(enum.Enum):
    mobile = "mobile"
    landline = "landline"
    fax = "fax"
    voip = "voip"


class Phone(BaseModel):
    __tablename__ = "phones"

    label = Column(String(255), nullable=False)
    number = Column(String(32), unique=True, nullable=False, index=True)
    phone_type = Column(Enum(PhoneType), default=PhoneType.mobile, nullable=False)
    extension = Column(String(10), nullable=True)
    location = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Phone(id={self.id}, number={self.number})>"
