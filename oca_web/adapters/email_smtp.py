from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Any, Dict

from oca_web.config.ini_config import EmailSettings
from oca_web.ports.notifier import Notifier

logger = logging.getLogger(__name__)

REPORT_SUBJECT = "Your Cloud Cost Anomaly Report"
ADMIN_SUBJECT = "New cloud cost analysis started"


class SmtpNotifier(Notifier):
    """smtplib adapter."""

    def __init__(self, settings: EmailSettings, smtp_factory=smtplib.SMTP):
        self._settings = settings
        self._smtp_factory = smtp_factory

    @property
    def enabled(self) -> bool:
        return self._settings.is_configured

    def _send(self, msg: EmailMessage) -> None:
        s = self._settings
        with self._smtp_factory(s.smtp_host, s.smtp_port, timeout=30) as smtp:
            if s.use_tls:
                smtp.starttls()
            if s.username:
                smtp.login(s.username, s.password)
            smtp.send_message(msg)

    def send_report(self, recipient: str, report_text: str) -> None:
        msg = EmailMessage()
        msg["Subject"] = REPORT_SUBJECT
        msg["From"] = self._settings.sender
        msg["To"] = recipient
        msg.set_content(report_text)
        self._send(msg)
        logger.info("Report emailed (%d chars)", len(report_text))

    def notify_admin(self, details: Dict[str, Any]) -> None:
        if not self._settings.admin_recipient:
            return
        msg = EmailMessage()
        msg["Subject"] = ADMIN_SUBJECT
        msg["From"] = self._settings.sender
        msg["To"] = self._settings.admin_recipient
        msg.set_content(
            "\n".join(
                [
                    f"Plan: {details.get('tier_name', '')}",
                    f"File(s): {details.get('file_name', '')}",
                    f"Cloud provider: {details.get('cloud_provider', '')}",
                ]
            )
        )
        self._send(msg)
