"""
Service email - envoi SMTP des invitations
"""

import logging
import smtplib
from email.message import EmailMessage

from tasknest.core.config import settings

logger = logging.getLogger(__name__)

SMTP_TIMEOUT = 30


class EmailError(Exception):
    pass


def send_email(to: str, subject: str, message: str):
    if not settings.SMTP_EMAIL or not settings.SMTP_PASSWORD:
        raise EmailError("SMTP credentials missing. Please check SMTP_EMAIL and SMTP_PASSWORD")

    msg = EmailMessage()
    msg["From"] = f"{settings.FROM_NAME} <{settings.FROM_EMAIL}>"
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(message)

    try:
        # port 465 = SSL direct, sinon STARTTLS
        use_ssl = settings.SMTP_PORT == 465
        smtp_class = smtplib.SMTP_SSL if use_ssl else smtplib.SMTP
        with smtp_class(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT) as server:
            if not use_ssl:
                server.starttls()
            server.login(settings.SMTP_EMAIL, settings.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Email send error: {e}")
        raise EmailError(str(e)) from e

    logger.info(f"Email sent to {to}")
