import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

import requests

from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger("email_service")


class EmailDeliveryError(Exception):
    """Neither the relay nor SMTP accepted the message."""


def send_email(to_email: str, subject: str, html_body: str) -> None:
    """
    Deliver an HTML email. Uses the HTTP relay when EMAIL_RELAY_URL is set,
    falling back to SMTP if the relay refuses; otherwise goes straight to SMTP.

    Raises:
        EmailDeliveryError: when the last transport tried fails
    """
    if settings.EMAIL_RELAY_URL:
        try:
            _post_to_relay(to_email, subject, html_body)
            return
        except requests.RequestException as e:
            logger.error(f"Email relay failed for {to_email}, falling back to SMTP: {str(e)}")

    _send_via_smtp(to_email, subject, html_body)


def _post_to_relay(to_email: str, subject: str, html_body: str) -> None:
    response = requests.post(
        settings.EMAIL_RELAY_URL,
        json={
            "to_email": to_email,
            "subject": subject,
            "body": html_body,
            "from_address": settings.MAIL_FROM_ADDRESS,
            "from_name": settings.MAIL_FROM_NAME,
        },
        headers={"X-API-Key": settings.EMAIL_RELAY_API_KEY},
        timeout=settings.EMAIL_RELAY_TIMEOUT,
    )
    response.raise_for_status()
    logger.info(f"Email '{subject}' sent via relay to {to_email}")


def _send_via_smtp(to_email: str, subject: str, html_body: str) -> None:
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = formataddr((settings.MAIL_FROM_NAME, settings.MAIL_FROM_ADDRESS))
    message["To"] = to_email
    message.set_content(html_body, subtype="html")

    context = ssl.create_default_context()
    try:
        # 465 is implicit TLS; anything else upgrades with STARTTLS when MAIL_ENCRYPTION asks for it
        if settings.MAIL_PORT == 465:
            server = smtplib.SMTP_SSL(settings.MAIL_HOST, settings.MAIL_PORT, context=context)
        else:
            server = smtplib.SMTP(settings.MAIL_HOST, settings.MAIL_PORT)

        with server as connection:
            if settings.MAIL_PORT != 465 and settings.MAIL_ENCRYPTION.lower() == "tls":
                connection.starttls(context=context)
            connection.login(settings.MAIL_USERNAME, settings.MAIL_PASSWORD)
            connection.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"SMTP delivery of '{subject}' to {to_email} failed: {str(e)}")
        raise EmailDeliveryError(str(e)) from e

    logger.info(f"Email '{subject}' sent via SMTP to {to_email}")
