"""Entry point for the mail index.

Usage::

    python -m mailindex ROOT --search phillip.allen@enron.com --before 2000-08-25T12:00:00-07:00
    python -m mailindex ROOT --max 1000 --sample 5
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime

import structlog

from .config import IndexerConfig
from .errors import AddressNotFoundError, InvalidArgumentError
from .indexer import MailIndexer
from .logging import setup_logging
from .models import HeaderPolicy
from .source import iter_maildir

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailindex",
        description="Index a maildir corpus by participant and query it",
    )
    parser.add_argument("root", help="Root directory of the maildir corpus")
    parser.add_argument("--max", dest="max_messages", type=int, default=None, help="Maximum files to ingest")
    parser.add_argument("--search", metavar="ADDRESS", help="List messages sent or received by ADDRESS")
    parser.add_argument(
        "--before",
        type=datetime.fromisoformat,
        help="Exclusive ISO-8601 cutoff for --search, with UTC offset",
    )
    parser.add_argument("--sample", type=int, metavar="N", help="Print N arbitrary indexed messages")
    parser.add_argument("--lenient", action="store_true", help="Accept headers in any order")
    parser.add_argument("--unfold", action="store_true", help="Join folded header lines")
    parser.add_argument("--sender-only", action="store_true", help="Index messages by sender only")
    parser.add_argument("--workers", type=int, default=None, help="Header parser threads")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--log-level", default=None, help="Root log level (default INFO)")
    return parser


def _apply_overrides(config: IndexerConfig, args: argparse.Namespace) -> IndexerConfig:
    overrides: dict[str, object] = {}
    if args.max_messages is not None:
        overrides["max_messages"] = args.max_messages
    if args.lenient:
        overrides["header_policy"] = HeaderPolicy.LENIENT
    if args.unfold:
        overrides["unfold_headers"] = True
    if args.sender_only:
        overrides["index_recipients"] = False
    if args.workers is not None:
        overrides["workers"] = args.workers
    if args.json_logs:
        overrides["log_json"] = True
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    return config.model_copy(update=overrides)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.search and args.before is None:
        parser.error("--search requires --before")

    try:
        config = _apply_overrides(IndexerConfig(), args)
        setup_logging(json=config.log_json, level=config.log_level)
    except ValueError as exc:
        # pydantic's ValidationError is a ValueError too
        parser.error(f"invalid settings: {exc}")

    try:
        indexer = MailIndexer.from_config(config)
        source = iter_maildir(args.root, suffix=config.file_suffix, encoding=config.encoding)
        indexer.ingest(source, config.max_messages)

        if args.search:
            for message in indexer.search(args.search, args.before):
                print(message.pretty())
        if args.sample is not None:
            for message in indexer.sample(args.sample):
                print(message.pretty())
    except (InvalidArgumentError, AddressNotFoundError) as exc:
        logger.error("query_rejected", error=str(exc))
        return 2
    except NotADirectoryError as exc:
        logger.error("corpus_root_invalid", error=str(exc))
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
