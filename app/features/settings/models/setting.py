from sqlalchemy import JSON, Column, String, UniqueConstraint

from app.platform.db.base import BaseModel


class Setting(BaseModel):
    """One named value inside a settings group, e.g. ("about", "headline")."""
    __tablename__ = "settings"
    __table_args__ = (UniqueConstraint("group", "name", name="uq_settings_group_name"),)

    group = Column(String(100), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    payload = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<Setting({self.group}.{self.name})>"
