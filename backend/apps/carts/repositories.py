from typing import ContextManager

from apps.common.session import PageSessionCache

from .models import Cart

CART_KEY = "cart"


class CartRepository:
    """Loads and saves the page session's Cart. A new session starts empty."""

    def __init__(self, sessions: PageSessionCache):
        self.sessions = sessions

    def load(self, session_id: str) -> Cart:
        cart = self.sessions.get(session_id, CART_KEY)
        return cart if isinstance(cart, Cart) else Cart()

    def save(self, session_id: str, cart: Cart) -> Cart:
        self.sessions.set(session_id, CART_KEY, cart)
        return cart

    def lock(self, session_id: str) -> ContextManager[None]:
        """Hold across load and save so concurrent requests cannot drop updates."""
        return self.sessions.lock(session_id)
