"""In-memory participant index backing ``search`` and ``sample``."""

from __future__ import annotations

import bisect
import itertools
import math
import random
import threading
from datetime import datetime
from typing import NamedTuple

from .errors import AddressNotFoundError, InvalidArgumentError
from .models import Message


class _Entry(NamedTuple):
    """Sort key plus payload; ``seq`` is unique so ``message`` is never compared."""

    neg_epoch: float
    seq: int
    message: Message


class ParticipantIndex:
    """Messages keyed by participant address, newest first.

    Each address maps to a list kept sorted on ``(-sent_time, arrival)``
    by binary insertion, so two messages sharing a timestamp are both
    retained and keep the order they arrived in.

    Inserts are serialized by a lock.  Queries take no lock and are meant
    to run once ingestion has finished.
    """

    def __init__(
        self,
        *,
        index_recipients: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        self._index_recipients = index_recipients
        self._rng = rng or random.Random()
        self._by_address: dict[str, list[_Entry]] = {}
        self._messages: list[Message] = []
        self._seq = itertools.count()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, address: object) -> bool:
        return address in self._by_address

    @property
    def addresses(self) -> list[str]:
        return list(self._by_address)

    @property
    def index_recipients(self) -> bool:
        return self._index_recipients

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, message: Message) -> None:
        """Add *message* under its sender (and recipients, if enabled)."""
        if self._index_recipients:
            addresses = message.participants
        else:
            addresses = (message.from_address,)

        neg_epoch = -message.sent_time.timestamp()
        with self._lock:
            entry = _Entry(neg_epoch, next(self._seq), message)
            for address in addresses:
                bisect.insort(self._by_address.setdefault(address, []), entry)
            self._messages.append(message)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def search(self, address: str, max_time: datetime) -> list[Message]:
        """Messages involving *address* sent strictly before *max_time*, newest first.

        Raises :class:`AddressNotFoundError` if *address* was never indexed,
        which is distinct from an indexed address with no match (``[]``).
        """
        if max_time.tzinfo is None or max_time.utcoffset() is None:
            raise InvalidArgumentError("max_time must be timezone-aware")

        entries = self._by_address.get(address)
        if entries is None:
            raise AddressNotFoundError(address)

        # Entries at or after the cutoff sort before (-cutoff, inf).
        start = bisect.bisect_right(entries, (-max_time.timestamp(), math.inf))
        return [entry.message for entry in entries[start:]]

    def sample(self, n: int) -> list[Message]:
        """Return *n* distinct indexed messages in no particular order."""
        total = len(self._messages)
        if n < 0:
            raise InvalidArgumentError(f"sample size must be >= 0, got {n}")
        if n > total:
            raise InvalidArgumentError(f"sample size {n} exceeds the {total} indexed messages")
        return self._rng.sample(self._messages, n)
