from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Protocol

log = logging.getLogger(__name__)


class EmailSender(Protocol):
    def send(self, to: str, subject: str, html: str) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class SmtpConfig:
    host: Optional[str]
    port: int
    user: Optional[str]
    password: Optional[str]
    from_email: Optional[str] = None
    from_name: str = "HRIS Management"

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.user and self.password)

    @property
    def sender(self) -> str:
        address = self.from_email or self.user or ""
        return f"{self.from_name} <{address}>" if self.from_name else address


class SmtpEmailSender(EmailSender):
    """Send HTML mail over SMTP (implicit SSL on 465, STARTTLS otherwise).

    When SMTP is not configured the message is only logged, so local flows
    that notify users keep working.
    """

    def __init__(self, config: SmtpConfig, *, timeout: int = 30):
        self._config = config
        self._timeout = timeout

    def send(self, to: str, subject: str, html: str) -> None:
        cfg = self._config
        if not cfg.is_configured:
            log.info("SMTP not configured; would send to %s (subject=%s)", to, subject)
            return

        msg = EmailMessage()
        msg["From"] = cfg.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("Email ini membutuhkan klien yang mendukung HTML.")
        msg.add_alternative(html, subtype="html")

        context = ssl.create_default_context()
        if cfg.port == 465:
            with smtplib.SMTP_SSL(cfg.host, cfg.port, context=context, timeout=self._timeout) as smtp:
                smtp.login(cfg.user, cfg.password)
                smtp.send_message(msg)
        else:
            with smtplib.SMTP(cfg.host, cfg.port, timeout=self._timeout) as smtp:
                smtp.ehlo()
                smtp.starttls(context=context)
                smtp.ehlo()
                smtp.login(cfg.user, cfg.password)
                smtp.send_message(msg)

        log.info("Email sent to %s (subject: %s)", to, subject)


def send_best_effort(sender: EmailSender, to: str, subject: str, html: str) -> bool:
    """Deliver a notification without letting delivery failures escape."""

    try:
        sender.send(to, subject, html)
        return True
    except Exception:
        log.exception("Email sending failed (to=%s, subject=%s)", to, subject)
        return False
