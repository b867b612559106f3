"""Request boundary of the word drill backend."""
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from wordrill.config import settings
from wordrill.errors import NotAuthenticated, NotFound, StoreError, ValidationError
from wordrill.models.base import SessionLocal, init_db
from wordrill.models.word_models import WordResult
from wordrill.monitoring import request_duration, requests_total
from wordrill.services.catalog import WordCatalog
from wordrill.services.identity_service import IdentityCache
from wordrill.services.performance_service import PerformanceService
from wordrill.services.sampler import RandomSampler
from wordrill.services.statistics_service import StatisticsService
from wordrill.services.user_service import UserService, extract_identity
from wordrill.services.word_selector import WordSelector
from wordrill.store import DocumentStore, SqlDocumentStore

logger = logging.getLogger(__name__)


@dataclass
class Response:
    """Status code and body handed back to the gateway."""
    status_code: int
    body: str = ""


class WordrillApp:
    """Main application class, wiring the services around one catalog."""

    def __init__(self, store: DocumentStore, catalog: WordCatalog):
        """Initialize the application with a loaded catalog."""
        self.store = store
        self.catalog = catalog
        self.identity_cache = IdentityCache(store)
        self.user_service = UserService(store)
        self.statistics_service = StatisticsService(store)
        self.word_selector = WordSelector(
            PerformanceService(store, catalog),
            RandomSampler(catalog),
        )

    @classmethod
    def bootstrap(cls, store: Optional[DocumentStore] = None) -> "WordrillApp":
        """Create tables, connect the store and load the catalog.

        A ColdStartFailure propagates: the process has no fallback content
        and must not serve traffic.
        """
        if store is None:
            init_db()
            store = SqlDocumentStore(SessionLocal)
            logger.info("Database initialized")
        catalog = WordCatalog.load(store)
        return cls(store, catalog)

    def handle_request(self, event: Mapping[str, Any]) -> Response:
        """Dispatch a gateway event by HTTP method."""
        method = _request_context(event).get("httpMethod") or event.get("httpMethod", "")
        start = time.perf_counter()

        if method == "GET":
            response = self.handle_get_words(event)
        elif method == "POST":
            response = self.handle_results(event)
        else:
            response = Response(405, "Method Not Allowed")

        request_duration.labels(method=method or "unknown").observe(time.perf_counter() - start)
        requests_total.labels(method=method or "unknown", status=str(response.status_code)).inc()
        return response

    def handle_get_words(self, event: Mapping[str, Any]) -> Response:
        """Serve a batch of words to the signed-in user."""
        user_id = None
        try:
            email, _ = extract_identity(_request_context(event).get("authorizer"))
            count = parse_word_count((event.get("queryStringParameters") or {}).get("numWords"))
            user_id = self.identity_cache.resolve(email)
            words = self.word_selector.select(user_id, count)
        except NotAuthenticated as e:
            return Response(401, str(e))
        except ValidationError:
            return Response(400, "Invalid numWords parameter")
        except NotFound:
            return Response(404, "User not found")
        except StoreError as e:
            logger.error(f"Error retrieving words for user {user_id}: {e}")
            return Response(500, "Internal server error")

        return Response(200, json.dumps([word.to_dict() for word in words]))

    def handle_results(self, event: Mapping[str, Any]) -> Response:
        """Record the outcomes submitted by the signed-in user."""
        user_id = None
        try:
            email, _ = extract_identity(_request_context(event).get("authorizer"))
            user_id = self.identity_cache.resolve(email)
        except NotAuthenticated as e:
            return Response(401, str(e))
        except NotFound:
            return Response(404, "User not found")
        except StoreError as e:
            logger.error(f"Error getting user id: {e}")
            return Response(500, "Internal server error")

        try:
            results = WordResult.list_from_json(json.loads(event.get("body") or ""))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Invalid request body from user {user_id}: {e}")
            return Response(400, "Invalid request body")

        try:
            self.statistics_service.record_results(user_id, results)
        except StoreError as e:
            logger.error(f"Error updating word statistics for user {user_id}: {e}")
            return Response(500, "Failed to update statistics")

        return Response(200, "Word results successfully uploaded")

    def handle_sign_in(self, event: Mapping[str, Any]) -> Response:
        """Provision the user record for a freshly verified identity."""
        try:
            email, name = extract_identity(_request_context(event).get("authorizer"))
            self.user_service.store_user_if_not_exists(email, name)
        except NotAuthenticated as e:
            return Response(401, str(e))
        except StoreError as e:
            logger.error(f"Error storing user: {e}")
            return Response(500, "Could not store user")
        return Response(200)


def _request_context(event: Mapping[str, Any]) -> Dict[str, Any]:
    return event.get("requestContext") or {}


def parse_word_count(raw: Optional[str]) -> int:
    """Parse the ``numWords`` parameter; missing means the configured default."""
    if raw is None or raw == "":
        return settings.selection.default_word_count
    try:
        count = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"numWords must be an integer, got {raw!r}") from None
    if count <= 0:
        raise ValidationError(f"numWords must be positive, got {count}")
    return count
