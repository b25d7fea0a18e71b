"""MailIndexer: parse a stream of message files into a :class:`ParticipantIndex`."""

from __future__ import annotations

import itertools
import random
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

import structlog

from .config import MAX_INGEST_COUNT, IndexerConfig
from .errors import InvalidArgumentError, MalformedMessageError
from .index import ParticipantIndex
from .models import HeaderPolicy, IngestReport, Message
from .parser import HeaderParser, split_lines

logger = structlog.get_logger()


class MailIndexer:
    """Public entry point: ``ingest`` once, then ``search`` / ``sample``.

    Parsing may be spread over a thread pool (``workers > 1``); parsed
    messages are always inserted from the ingesting thread, so the index
    has a single writer.
    """

    def __init__(
        self,
        *,
        policy: HeaderPolicy = HeaderPolicy.STRICT,
        unfold: bool = False,
        index_recipients: bool = True,
        workers: int = 1,
        rng: random.Random | None = None,
    ) -> None:
        if workers < 1:
            raise InvalidArgumentError(f"workers must be >= 1, got {workers}")
        self._parser = HeaderParser(policy, unfold=unfold)
        self._index = ParticipantIndex(index_recipients=index_recipients, rng=rng)
        self._workers = workers

    @classmethod
    def from_config(cls, config: IndexerConfig, *, rng: random.Random | None = None) -> MailIndexer:
        return cls(
            policy=config.header_policy,
            unfold=config.unfold_headers,
            index_recipients=config.index_recipients,
            workers=config.workers,
            rng=rng,
        )

    @property
    def index(self) -> ParticipantIndex:
        return self._index

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest(self, items: Iterable[tuple[str, str]], max_count: int) -> IngestReport:
        """Parse and index at most *max_count* ``(path, text)`` items.

        *max_count* is validated before *items* is touched.  Malformed
        messages are counted as skipped and never raised.
        """
        if not 0 <= max_count <= MAX_INGEST_COUNT:
            raise InvalidArgumentError(
                f"max_count must be between 0 and {MAX_INGEST_COUNT}, got {max_count}"
            )

        logger.info(
            "ingest_started",
            max_count=max_count,
            policy=self._parser.policy.value,
            workers=self._workers,
        )

        read = indexed = skipped = 0
        for message in self._parse_all(itertools.islice(items, max_count)):
            read += 1
            if message is None:
                skipped += 1
                continue
            self._index.insert(message)
            indexed += 1

        report = IngestReport(read=read, indexed=indexed, skipped=skipped)
        logger.info("ingest_completed", **report.model_dump(), addresses=len(self._index.addresses))
        return report

    def _parse_all(self, items: Iterable[tuple[str, str]]) -> Iterator[Message | None]:
        if self._workers == 1:
            yield from map(self._parse_item, items)
            return

        with ThreadPoolExecutor(
            max_workers=self._workers,
            thread_name_prefix="mailindex-parse",
        ) as pool:
            yield from pool.map(self._parse_item, items)

    def _parse_item(self, item: tuple[str, str]) -> Message | None:
        path, text = item
        try:
            return self._parser.extract(split_lines(text))
        except MalformedMessageError as exc:
            logger.debug("message_skipped", path=path, state=exc.state, reason=exc.reason)
            return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(self, address: str, max_time: datetime) -> list[Message]:
        return self._index.search(address, max_time)

    def sample(self, n: int) -> list[Message]:
        return self._index.sample(n)
