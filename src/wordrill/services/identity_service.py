"""Resolution of verified emails to internal user ids."""
import logging
import threading
from typing import Dict, Optional

from wordrill.config import settings
from wordrill.errors import NotFound
from wordrill.store import DocumentStore

logger = logging.getLogger(__name__)


class IdentityCache:
    """Email to user id cache shared by all request handlers.

    Emails never change owner, so entries are never invalidated. Misses are
    not cached: a user provisioned after a failed lookup resolves on the
    next call.
    """

    def __init__(self, store: DocumentStore, index: Optional[str] = None):
        self.store = store
        self.index = index or settings.store.email_index
        self._user_ids: Dict[str, str] = {}
        self._lock = threading.Lock()

    def resolve(self, email: str) -> str:
        """Return the user id for ``email``; raises NotFound or StoreError."""
        user_id = self._user_ids.get(email)
        if user_id is not None:
            return user_id

        with self._lock:
            # Another thread may have resolved it while we waited for the lock
            user_id = self._user_ids.get(email)
            if user_id is not None:
                return user_id

            records = self.store.query_by_index(self.index, email, limit=1)
            if not records:
                logger.debug("No user found for the requested email")
                raise NotFound("No user found for the requested email")

            user_id = records[0]["user_id"]
            self._user_ids[email] = user_id
            logger.debug(f"Cached user id {user_id}")
            return user_id

    def __len__(self) -> int:
        return len(self._user_ids)
