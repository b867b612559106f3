"""Command line entry point for the word drill backend."""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from wordrill.app import WordrillApp
from wordrill.config import settings
from wordrill.errors import ColdStartFailure, ItemExists, StoreError
from wordrill.logging_config import setup_logging
from wordrill.models.base import SessionLocal, init_db
from wordrill.monitoring import start_monitoring
from wordrill.services.user_service import UserService
from wordrill.store import SqlDocumentStore

logger = logging.getLogger(__name__)


def _authorizer_event(method: str, email: str, **extra) -> dict:
    """Gateway-shaped event for a locally invoked request."""
    event = {"requestContext": {"httpMethod": method, "authorizer": {"email": email}}}
    event.update(extra)
    return event


def import_words(store: SqlDocumentStore, path: Path) -> int:
    """Put every word of a JSON list of ``{word, correct, incorrect}`` into the catalog table."""
    with path.open(encoding="utf-8") as f:
        words = json.load(f)

    imported = 0
    for word in words:
        try:
            store.put_item(
                settings.store.words_table,
                {"word": word["word"], "correct": word["correct"], "incorrect": list(word.get("incorrect", []))},
            )
            imported += 1
        except ItemExists:
            logger.info(f"Skipping existing word {word['word']!r}")
    logger.info(f"Imported {imported} words from {path}")
    return imported


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordrill", description="Adaptive vocabulary drill backend")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    parser.add_argument("--metrics-port", type=int, default=None, help="Start the Prometheus exporter on this port")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create the database tables")

    import_parser = subparsers.add_parser("import-words", help="Load words from a JSON file")
    import_parser.add_argument("file", type=Path)

    sign_in_parser = subparsers.add_parser("sign-in", help="Provision a user")
    sign_in_parser.add_argument("email")
    sign_in_parser.add_argument("--name", default="")

    words_parser = subparsers.add_parser("words", help="Fetch a batch of words for a user")
    words_parser.add_argument("email")
    words_parser.add_argument("-n", "--count", default=None, help="Number of words (numWords)")

    submit_parser = subparsers.add_parser("submit", help="Submit a JSON list of {word, isCorrect} results")
    submit_parser.add_argument("email")
    submit_parser.add_argument("file", type=Path)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run one command and return the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging("Starting wordrill ...", args.log_level)

    metrics_port = args.metrics_port
    if metrics_port is None and settings.monitoring.enabled:
        metrics_port = settings.monitoring.port
    if metrics_port is not None:
        start_monitoring(metrics_port)
        logger.info(f"Metrics exported on port {metrics_port}")

    init_db()
    store = SqlDocumentStore(SessionLocal)

    if args.command == "init-db":
        logger.info("Database initialized")
        return 0

    try:
        if args.command == "import-words":
            import_words(store, args.file)
            return 0
        if args.command == "sign-in":
            user = UserService(store).store_user_if_not_exists(args.email, args.name)
            print(user["user_id"])
            return 0
    except StoreError as e:
        logger.error(f"Store error: {e}")
        return 1

    try:
        app = WordrillApp.bootstrap(store)
    except ColdStartFailure as e:
        logger.critical(f"Initialization failed: {e}")
        return 1

    if args.command == "words":
        params = {"numWords": args.count} if args.count is not None else {}
        response = app.handle_request(_authorizer_event("GET", args.email, queryStringParameters=params))
    else:
        body = args.file.read_text(encoding="utf-8")
        response = app.handle_request(_authorizer_event("POST", args.email, body=body))

    print(response.body)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
