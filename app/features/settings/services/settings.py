from typing import Dict, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.settings.models.setting import Setting
from app.features.settings.schemas.about import AboutSettings
from app.platform.logger import get_logger

logger = get_logger(__name__)

ABOUT_GROUP = "about"

SettingsT = TypeVar("SettingsT", bound=BaseModel)


async def load_group(db: AsyncSession, group: str, schema: Type[SettingsT]) -> SettingsT:
    """Build `schema` from the stored rows of `group`; fields with no row keep their defaults."""
    result = await db.execute(select(Setting).where(Setting.group == group))
    stored: Dict[str, object] = {
        row.name: row.payload for row in result.scalars().all() if row.name in schema.model_fields
    }
    return schema(**stored)


async def save_group(db: AsyncSession, group: str, values: BaseModel) -> None:
    result = await db.execute(select(Setting).where(Setting.group == group))
    existing = {row.name: row for row in result.scalars().all()}

    for name, payload in values.model_dump(mode="json").items():
        row = existing.get(name)
        if row:
            row.payload = payload
        else:
            db.add(Setting(group=group, name=name, payload=payload))

    await db.commit()
    logger.info(f"Saved settings group '{group}'")


async def get_about_settings(db: AsyncSession) -> AboutSettings:
    return await load_group(db, ABOUT_GROUP, AboutSettings)


async def update_about_settings(db: AsyncSession, data: AboutSettings) -> AboutSettings:
    await save_group(db, ABOUT_GROUP, data)
    return await get_about_settings(db)
