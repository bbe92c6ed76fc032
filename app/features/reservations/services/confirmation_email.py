import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.services.email import send_email

logger = get_logger(__name__)

current_dir = os.path.dirname(os.path.abspath(__file__))
template_dir = os.path.join(current_dir, "../template")

env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(["html"]))

RESERVATION_CONFIRMATION_SUBJECT = "Reservation confirmation"


@dataclass(frozen=True)
class ReservationEmailContext:
    """Snapshot of what the email needs, taken before the request's session closes."""

    reservation_id: str
    project_name: str
    project_image_url: Optional[str]
    reserved_for: datetime
    guests: int
    notes: Optional[str]
    user_name: str
    user_email: str

    @classmethod
    def from_models(cls, reservation, user, fallback_image_url: Optional[str] = None) -> "ReservationEmailContext":
        # Projects without their own image use the site-wide About image
        return cls(
            reservation_id=reservation.id,
            project_name=reservation.project_name,
            project_image_url=reservation.project_image_url or fallback_image_url,
            reserved_for=reservation.reserved_for,
            guests=reservation.guests,
            notes=reservation.notes,
            user_name=user.name or user.first_name or user.email.split("@")[0],
            user_email=user.email,
        )


def render_reservation_confirmation(context: ReservationEmailContext) -> str:
    template = env.get_template("reservation_confirmation.html")
    return template.render(
        reservation=context,
        user_name=context.user_name,
        project_image=context.project_image_url,
        app_name=settings.APP_NAME,
        frontend_url=settings.FRONTEND_URL,
    )


def send_reservation_confirmation(context: ReservationEmailContext) -> None:
    """Render and send the confirmation. Runs as a background task after the response."""
    body = render_reservation_confirmation(context)
    try:
        send_email(context.user_email, RESERVATION_CONFIRMATION_SUBJECT, body)
    except Exception as e:
        logger.error(f"Failed to send reservation confirmation {context.reservation_id}: {str(e)}")
        raise
    logger.info(f"Reservation confirmation {context.reservation_id} sent to {context.user_email}")
