from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.phones.models.phone import Phone
from app.features.phones.schemas.phone import PhoneCreate, PhoneUpdate
from app.platform.logger import get_logger

logger = get_logger(__name__)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _raise_if_duplicate_number(error: IntegrityError) -> None:
    # sqlite: "UNIQUE constraint failed: phones.number", postgres: "phones_number_key"
    message = str(error.orig).lower()
    if "unique" in message and "number" in message:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A phone with this number already exists",
        )


async def list_phones(
    db: AsyncSession,
    skip: int = 0,
    limit: int = 20,
    search: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> Tuple[List[Phone], int]:
    query = select(Phone)
    if search:
        pattern = f"%{_escape_like(search.strip())}%"
        query = query.where(
            or_(Phone.label.ilike(pattern, escape="\\"), Phone.number.ilike(pattern, escape="\\"))
        )
    if is_active is not None:
        query = query.where(Phone.is_active == is_active)

    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    result = await db.execute(query.order_by(Phone.label, Phone.id).offset(skip).limit(limit))
    return list(result.scalars().all()), total or 0


async def get_phone(db: AsyncSession, phone_id: str) -> Phone:
    result = await db.execute(select(Phone).where(Phone.id == phone_id))
    phone = result.scalar_one_or_none()
    if not phone:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Phone not found")
    return phone


async def create_phone(db: AsyncSession, data: PhoneCreate) -> Phone:
    phone = Phone(**data.model_dump())
    db.add(phone)
    try:
        await db.commit()
        await db.refresh(phone)
    except IntegrityError as e:
        await db.rollback()
        _raise_if_duplicate_number(e)
        raise

    logger.info(f"Created phone {phone.id}")
    return phone


async def update_phone(db: AsyncSession, phone_id: str, data: PhoneUpdate) -> Phone:
    phone = await get_phone(db, phone_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(phone, field, value)

    try:
        await db.commit()
        await db.refresh(phone)
    except IntegrityError as e:
        await db.rollback()
        _raise_if_duplicate_number(e)
        raise
    return phone


async def delete_phone(db: AsyncSession, phone_id: str) -> bool:
    phone = await get_phone(db, phone_id)
    await db.delete(phone)
    await db.commit()

    logger.info(f"Deleted phone {phone_id}")
    return True
