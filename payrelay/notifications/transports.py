"""Mail transports used by the notifier.

SMTP mirrors a classic mail relay (implicit TLS on port 465, STARTTLS
otherwise). The Resend transport posts to the provider's HTTP API.
"""

from __future__ import annotations

from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import smtplib
import ssl
from typing import Optional

from payrelay.core.config import Settings
from payrelay.core.errors import ConfigurationError, NotificationError
from payrelay.integrations.email import ResendClient
from payrelay.notifications.base import MailTransport, NotificationEmail


SMTP_IMPLICIT_TLS_PORT = 465


def build_mime_message(email: NotificationEmail) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = email.subject
    msg["From"] = email.from_address
    msg["To"] = ", ".join(email.to)
    msg.attach(MIMEText(email.text, "plain", "utf-8"))
    if email.html:
        msg.attach(MIMEText(email.html, "html", "utf-8"))
    return msg


class SmtpTransport:
    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        user: str = "",
        password: str = "",
        timeout_seconds: int = 15,
    ) -> None:
        self._host = host.strip()
        self._port = port
        self._user = user.strip()
        self._password = password
        self._timeout_seconds = max(1, timeout_seconds)

    @property
    def uses_implicit_tls(self) -> bool:
        return self._port == SMTP_IMPLICIT_TLS_PORT

    def _connect(self) -> smtplib.SMTP:
        if self.uses_implicit_tls:
            return smtplib.SMTP_SSL(
                self._host,
                self._port,
                timeout=self._timeout_seconds,
                context=ssl.create_default_context(),
            )
        return smtplib.SMTP(self._host, self._port, timeout=self._timeout_seconds)

    def send(self, email: NotificationEmail) -> None:
        if not self._host:
            raise NotificationError("smtp_host_missing")
        if not email.to:
            raise NotificationError("email_recipients_missing")

        message = build_mime_message(email)
        try:
            with self._connect() as server:
                if not self.uses_implicit_tls and self._user:
                    server.starttls(context=ssl.create_default_context())
                if self._user and self._password:
                    server.login(self._user, self._password)
                server.sendmail(email.from_address, email.to, message.as_string())
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"smtp_delivery_failed error={exc}") from exc


class ResendTransport:
    def __init__(self, client: ResendClient) -> None:
        self._client = client

    def send(self, email: NotificationEmail) -> None:
        if not email.to:
            raise NotificationError("email_recipients_missing")
        self._client.send_email(
            from_address=email.from_address,
            to=email.to,
            subject=email.subject,
            text=email.text,
            html=email.html,
        )


def build_mail_transport(settings: Settings, *, resend_client: Optional[ResendClient] = None) -> MailTransport:
    transport = settings.mail_transport.strip().lower()
    if transport == "smtp":
        return SmtpTransport(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            timeout_seconds=settings.smtp_timeout_seconds,
        )
    if transport == "resend":
        return ResendTransport(
            resend_client
            or ResendClient(
                api_key=settings.email_api_key,
                base_url=settings.email_api_base_url,
                timeout_seconds=settings.email_api_timeout_seconds,
            )
        )
    raise ConfigurationError(f"Unsupported mail transport: {settings.mail_transport}")
