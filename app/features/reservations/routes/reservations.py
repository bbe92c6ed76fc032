from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.auth.dependencies.auth import get_current_user
from app.features.auth.models.user import User
from app.features.reservations.schemas.reservation import ReservationCreate, ReservationResponse
from app.features.reservations.services.confirmation_email import (
    ReservationEmailContext,
    send_reservation_confirmation,
)
from app.features.reservations.services.reservation import (
    create_reservation,
    list_reservations_for_user,
)
from app.features.settings.services.settings import get_about_settings
from app.platform.db.session import get_db
from app.platform.response import api_response

router = APIRouter(prefix="/reservations", tags=["Reservations"])


@router.post(
    "",
    response_model=dict,
    status_code=status.HTTP_201_CREATED,
    summary="Create a reservation",
    description="Book a project for the current user and email a confirmation",
)
async def create_reservation_route(
    request: ReservationCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reservation = await create_reservation(db, current_user, request)
    about = await get_about_settings(db)

    background_tasks.add_task(
        send_reservation_confirmation,
        ReservationEmailContext.from_models(reservation, current_user, fallback_image_url=about.image_url),
    )

    return api_response(
        data=ReservationResponse.model_validate(reservation),
        message="Reservation created successfully. A confirmation email is on its way.",
        status_code=status.HTTP_201_CREATED,
    )


@router.get("", response_model=dict, summary="List my reservations")
async def list_reservations_route(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reservations = await list_reservations_for_user(db, current_user.id)
    return api_response(
        data=[ReservationResponse.model_validate(r) for r in reservations],
        message="Reservations retrieved successfully",
    )
