from __future__ import annotations

from apps.common import get_logger
from apps.common.protocols import CacheBackendProtocol
from apps.common.session import is_valid_session_id

logger = get_logger(__name__).bind(component="preferences", layer="service")

THEME_LIGHT = "light"
THEME_DARK = "dark"
THEMES = (THEME_LIGHT, THEME_DARK)
DEFAULT_THEME = THEME_LIGHT


class InvalidThemeError(ValueError):
    """Raised when a theme value other than light/dark is requested."""


class ThemeService:
    """
    Light/dark preference kept in a key-value store.

    The value is stored without expiry and keyed by client id, so it outlives
    any single page session.
    """

    def __init__(self, store: CacheBackendProtocol, prefix: str = "storefront:preferences"):
        self.store = store
        self.prefix = prefix
        self.logger = logger.bind(service="ThemeService")

    def _key(self, client_id: str) -> str:
        if not is_valid_session_id(client_id):
            raise ValueError(f"Invalid client id: {client_id!r}")
        return f"{self.prefix}:theme:{client_id}"

    def get_theme(self, client_id: str) -> str:
        theme = self.store.get(self._key(client_id))
        return theme if theme in THEMES else DEFAULT_THEME

    def set_theme(self, client_id: str, theme: str) -> str:
        if theme not in THEMES:
            self.logger.warning("Rejected unknown theme", client_id=client_id, theme=theme)
            raise InvalidThemeError(f"Unsupported theme: {theme}")
        self.store.set(self._key(client_id), theme, timeout=None)
        self.logger.info("Theme preference saved", client_id=client_id, theme=theme)
        return theme

    def toggle_theme(self, client_id: str) -> str:
        current = self.get_theme(client_id)
        return self.set_theme(client_id, THEME_LIGHT if current == THEME_DARK else THEME_DARK)
