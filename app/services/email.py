"""Outgoing mail for account activation and password reset."""

import logging
import smtplib
from email.header import Header
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.config import get_settings
from app.errors import EmailDeliveryError
from app.i18n import translate

logger = logging.getLogger("hoaxify")


class EmailService:
    """Renders mail templates and hands them to the configured SMTP server."""

    def __init__(self) -> None:
        settings = get_settings()
        self.templates = Environment(
            loader=FileSystemLoader(settings.TEMPLATE_DIR),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, template: str, locale: str, prefix: str, email: str, link: str) -> tuple[str, str, str]:
        """Render (subject, text body, html body) for one of the mail templates."""
        context = {
            "title": translate(locale, f"{prefix}_subject"),
            "intro": translate(locale, f"{prefix}_intro"),
            "action": translate(locale, f"{prefix}_action"),
            "email": email,
            "link": link,
            "locale": locale,
        }
        text = self.templates.get_template(f"email/{template}.txt").render(**context)
        html = self.templates.get_template(f"email/{template}.html").render(**context)
        return context["title"], text, html

    def send(self, to_email: str, subject: str, text_content: str, html_content: str) -> None:
        """Send a multipart mail. Raises EmailDeliveryError when the server refuses it."""
        settings = get_settings()
        if not settings.MAIL_ENABLED:
            logger.info("Mail disabled. Would send '%s' to %s:\n%s", subject, to_email, text_content)
            return

        msg = MIMEMultipart("alternative")
        msg["From"] = settings.MAIL_FROM
        msg["To"] = to_email
        msg["Subject"] = Header(subject, "utf-8")
        msg.attach(MIMEText(text_content, "plain", "utf-8"))
        msg.attach(MIMEText(html_content, "html", "utf-8"))

        try:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as server:
                if settings.SMTP_USE_TLS:
                    server.starttls()
                if settings.SMTP_USERNAME and settings.SMTP_PASSWORD:
                    server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' to %s: %s", subject, to_email, e)
            raise EmailDeliveryError() from e

        logger.info("Mail '%s' sent to %s", subject, to_email)

    def send_account_activation(self, email: str, token: str, locale: str) -> None:
        link = f"{get_settings().APP_BASE_URL}/#/login?token={token}"
        subject, text, html = self.render("account_activation", locale, "activation_email", email, link)
        self.send(email, subject, text, html)

    def send_password_reset(self, email: str, token: str, locale: str) -> None:
        link = f"{get_settings().APP_BASE_URL}/#/password-reset?reset={token}"
        subject, text, html = self.render("password_reset", locale, "password_reset_email", email, link)
        self.send(email, subject, text, html)


_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Get singleton email service instance."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
