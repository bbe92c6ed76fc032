from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from app.platform.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    # Social-login accounts get a random, never-disclosed password
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(1024), nullable=True)

    email_verified_at = Column(DateTime(timezone=True), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    # Captured once, at registration
    registration_ip = Column(String(45), nullable=True)
    browser = Column(String(100), nullable=True)
    platform = Column(String(100), nullable=True)
    device = Column(String(50), nullable=True)

    # Refreshed on every successful login
    last_login_ip = Column(String(45), nullable=True)
    last_login_country = Column(String(2), nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    providers = relationship(
        "Provider",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_email_verified(self) -> bool:
        return self.email_verified_at is not None

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
