import logging
import smtplib
from email.message import EmailMessage
from aisentinel.config import (APP_BASE_URL, EMAIL_TOKEN_TTL_HOURS, SMTP_HOST, SMTP_PORT,
                               SMTP_USERNAME, SMTP_PASSWORD, SMTP_SENDER)
from aisentinel.services.utils.logger_config import mask_email

_logger = logging.getLogger(__name__)


def verification_link(token: str) -> str:
    return f"{APP_BASE_URL}/api/auth/verify?token={token}"


def build_verification_email(email: str, token: str) -> EmailMessage:
    """
    email: str (recipient address being verified)
    token: str (one-time verification token)
    """
    link = verification_link(token)
    message_obj = EmailMessage()
    message_obj["From"] = SMTP_SENDER
    message_obj["To"] = email
    message_obj["Subject"] = "Verify your email for AI Sentinel"
    message_obj.set_content(
        f"Open this link to sign in to AI Sentinel:\n\n{link}\n\n"
        f"The link expires in {EMAIL_TOKEN_TTL_HOURS} hour(s) and can be used once."
    )
    message_obj.add_alternative(
        f'<p><a href="{link}">Sign in to AI Sentinel</a></p>'
        f"<p>The link expires in {EMAIL_TOKEN_TTL_HOURS} hour(s) and can be used once.</p>",
        subtype="html",
    )
    return message_obj


def send_verification_email(email: str, token: str) -> bool:
    """Deliver the verification link. Returns False when no SMTP host is configured or delivery fails."""
    message_obj = build_verification_email(email, token)
    if not SMTP_HOST:
        _logger.warning(f"SMTP_HOST not set; verification email for {mask_email(email)} not sent")
        return False

    _logger.info(f"Sending verification email to {mask_email(email)}")
    try:
        with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=10) as smtp:
            smtp.starttls()
            if SMTP_USERNAME:
                smtp.login(SMTP_USERNAME, SMTP_PASSWORD or "")
            smtp.send_message(message_obj)
    except (smtplib.SMTPException, OSError) as e:
        _logger.error(f"Error sending verification email to {mask_email(email)}: {str(e)}", exc_info=True)
        return False
    return True
