from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.models.user import User
from app.features.reservations.models.reservation import Reservation, ReservationStatus
from app.features.reservations.schemas.reservation import ReservationCreate
from app.platform.logger import get_logger

logger = get_logger(__name__)


async def create_reservation(db: AsyncSession, user: User, data: ReservationCreate) -> Reservation:
    reservation = Reservation(
        user_id=user.id,
        status=ReservationStatus.confirmed,
        **data.model_dump(),
    )
    db.add(reservation)
    await db.commit()
    await db.refresh(reservation)

    logger.info(f"Reservation {reservation.id} created for user {user.id}")
    return reservation


async def list_reservations_for_user(db: AsyncSession, user_id: str) -> List[Reservation]:
    result = await db.execute(
        select(Reservation)
        .where(Reservation.user_id == user_id)
        .order_by(Reservation.reserved_for.desc())
    )
    return list(result.scalars().all())
