from typing import Any, Dict


class Notifier:
    """Fire-and-forget delivery. Failures must not reach the Flow Controller."""

    @property
    def enabled(self) -> bool:
        return False

    def notify_admin(self, details: Dict[str, Any]) -> None:
        raise NotImplementedError

    def send_report(self, recipient: str, report_text: str) -> None:
        raise NotImplementedError


class NullNotifier(Notifier):
    """Used when email delivery is not configured."""

    def notify_admin(self, details: Dict[str, Any]) -> None:
        return None

    def send_report(self, recipient: str, report_text: str) -> None:
        raise RuntimeError("Email delivery is not configured.")
