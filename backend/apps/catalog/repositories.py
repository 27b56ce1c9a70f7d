from apps.common.session import PageSessionCache

from .store import CatalogStore

CATALOG_KEY = "catalog"


class CatalogRepository:
    """Loads and saves the page session's CatalogStore."""

    def __init__(self, sessions: PageSessionCache):
        self.sessions = sessions

    def load(self, session_id: str) -> CatalogStore:
        store = self.sessions.get(session_id, CATALOG_KEY)
        return store if isinstance(store, CatalogStore) else CatalogStore()

    def save(self, session_id: str, store: CatalogStore) -> CatalogStore:
        self.sessions.set(session_id, CATALOG_KEY, store)
        return store
