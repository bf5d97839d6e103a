from typing import Optional

from flask import session

from oca_web.ports.storage import PreferenceStore

THEME_KEY = "theme"


class SessionPreferenceStore(PreferenceStore):
    """Preferences kept in the signed Flask session cookie. Needs a request context."""

    def get_theme(self) -> Optional[str]:
        return session.get(THEME_KEY)

    def set_theme(self, theme: str) -> None:
        session[THEME_KEY] = theme
