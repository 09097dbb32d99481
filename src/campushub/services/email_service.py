"""
# Email Service

Outbound email over SMTP using **aiosmtplib**. campushub sends one kind of email: the
one-time password used to authorize a password reset.
"""

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib
from fastapi import status

from campushub.config import settings
from campushub.managers.logging_manager import get_logger
from campushub.utils.exceptions import AppError
from campushub.utils.logging_utils import log_performance

logger = get_logger(prefix="[EmailService]")

OTP_EMAIL_SUBJECT = "Your OTP Verification Code"
OTP_SEND_FAILED_MESSAGE = "We couldn't send your OTP. Please try again in a moment."


class EmailService:
    """SMTP email sender configured from `SMTP_*` settings."""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD.get_secret_value()
        self.from_email = settings.EMAIL_FROM or settings.SMTP_USER
        self.start_tls = settings.SMTP_USE_TLS

    @log_performance("send_email")
    async def send_email(
        self, to_email: str, subject: str, html_content: str, text_content: Optional[str] = None
    ) -> None:
        """
        Send a multipart (plain + HTML) email.

        Raises:
            aiosmtplib.SMTPException: If the SMTP exchange fails.
        """
        message = MIMEMultipart("alternative")
        message["From"] = f"{settings.APP_NAME} <{self.from_email}>"
        message["To"] = to_email
        message["Subject"] = subject

        if text_content:
            message.attach(MIMEText(text_content, "plain"))
        message.attach(MIMEText(html_content, "html"))

        await aiosmtplib.send(
            message,
            hostname=self.smtp_host,
            port=self.smtp_port,
            username=self.smtp_user or None,
            password=self.smtp_password or None,
            start_tls=self.start_tls,
        )
        logger.info("Sent email to %s: %s", to_email, subject)

    async def send_otp_email(self, to_email: str, code: str) -> None:
        """
        Email a one-time password.

        Raises:
            AppError(500): If the email could not be delivered.
        """
        html_content = f"""
        <div style="font-family: Arial, sans-serif; max-width: 480px; margin: 0 auto;">
            <h2>Password Reset Verification</h2>
            <p>Use the code below to reset your password. It expires in {settings.OTP_EXPIRY_MINUTES} minutes.</p>
            <p style="font-size: 28px; font-weight: bold; letter-spacing: 6px;">{code}</p>
            <p>If you did not request a password reset, you can ignore this email.</p>
        </div>
        """
        try:
            await self.send_email(to_email, OTP_EMAIL_SUBJECT, html_content, f"Your OTP is: {code}")
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error("Failed to send OTP email to %s: %s", to_email, e, exc_info=True)
            raise AppError(OTP_SEND_FAILED_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)


# Global instance
email_service = EmailService()
