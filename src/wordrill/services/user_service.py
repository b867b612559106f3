"""User provisioning performed on sign-in."""
import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Dict, Mapping, Optional, Tuple

from wordrill.config import settings
from wordrill.errors import ItemExists, NotAuthenticated, StoreError
from wordrill.store import DocumentStore

# Configure logging
logger = logging.getLogger(__name__)


def extract_identity(authorizer: Optional[Mapping[str, Any]]) -> Tuple[str, str]:
    """Get ``(email, name)`` from a gateway authorizer context.

    The email is read either directly from the context or from its nested
    ``claims`` mapping. Tokens are verified by the gateway, never here.
    """
    authorizer = authorizer or {}
    claims = authorizer if isinstance(authorizer.get("email"), str) else authorizer.get("claims")
    if not isinstance(claims, Mapping):
        raise NotAuthenticated("Unauthorized")

    email = claims.get("email")
    if not isinstance(email, str) or not email:
        raise NotAuthenticated("Unauthorized: Email not found")

    name = " ".join(
        part for part in (claims.get("given_name"), claims.get("family_name")) if isinstance(part, str) and part
    )
    return email, name


class UserService:
    """Service for creating user records."""

    def __init__(self, store: DocumentStore):
        self.store = store
        self.table = settings.store.users_table
        self.index = settings.store.email_index

    def get_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Get user record by email."""
        records = self.store.query_by_index(self.index, email, limit=1)
        return records[0] if records else None

    def store_user_if_not_exists(self, email: str, name: str = "", provider: str = "google") -> Dict[str, Any]:
        """Get the user with ``email``, creating it on first sign-in."""
        user = self.get_user_by_email(email)
        if user is not None:
            return user

        user = {
            "user_id": str(uuid.uuid4()),
            "email": email,
            "name": name,
            "provider": provider,
            "created_at": datetime.now(UTC),
        }
        try:
            self.store.put_item(self.table, user)
        except ItemExists:
            # A concurrent sign-in created the user first
            existing = self.get_user_by_email(email)
            if existing is None:
                raise StoreError(f"User {email} reported as existing but not found") from None
            return existing

        logger.info(f"User {email} stored successfully")
        return user
