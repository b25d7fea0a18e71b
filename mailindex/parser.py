"""Header parser: ordered message lines → :class:`Message`.

Two policies are supported:

* ``STRICT`` walks a fixed state machine, one line per state::

      START (Message-ID:) → TIME (Date:) → FROM (From:) → TO (To:)
      → SUBJECT (Subject:) → END

  A line that does not carry the prefix expected by the current state
  rejects the whole message.  Lines after END (the rest of the header
  block and the body) are never looked at.

* ``LENIENT`` reads the header block up to the first blank line, takes
  the first occurrence of each required header wherever it appears, and
  rejects the message only if one is missing at the end.

The current state is a local of each call, so a single parser instance
can be shared by worker threads.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import ValidationError

from .errors import MalformedMessageError
from .models import HeaderPolicy, Message


class HeaderState(Enum):
    """Parser states, valued by the header prefix each one consumes."""

    START = "Message-ID:"
    TIME = "Date:"
    FROM = "From:"
    TO = "To:"
    SUBJECT = "Subject:"
    END = ""

    @property
    def prefix(self) -> str:
        return self.value


_NEXT_STATE: dict[HeaderState, HeaderState] = {
    HeaderState.START: HeaderState.TIME,
    HeaderState.TIME: HeaderState.FROM,
    HeaderState.FROM: HeaderState.TO,
    HeaderState.TO: HeaderState.SUBJECT,
    HeaderState.SUBJECT: HeaderState.END,
}

_REQUIRED: tuple[HeaderState, ...] = tuple(_NEXT_STATE)

# e.g. "Fri, 23 Jun 2000 14:05:00 -0700 (PDT)"
_DATE_RE = re.compile(
    r"(?P<stamp>[A-Z][a-z]{2}, \d{1,2} [A-Z][a-z]{2} \d{4} \d{2}:\d{2}:\d{2} [+-]\d{4})"
    r"(?: \([A-Za-z]+\))?"
)
_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"

_TO_SPLIT_RE = re.compile(r"[:,]")
_TO_LABEL = "To"

# Header line ends only; str.splitlines also breaks on \f, \v, \x1c-\x1e, \x85, \u2028.
_LINE_END_RE = re.compile(r"\r\n|\r|\n")


def _value(line: str) -> str:
    """Text after the first ``:`` of *line*, stripped."""
    return line.partition(":")[2].strip()


def _extract_message_id(line: str) -> str:
    value = _value(line)
    if not value:
        raise MalformedMessageError(HeaderState.START.name, "empty Message-ID")
    return value


def _extract_time(line: str) -> datetime:
    value = line[len(HeaderState.TIME.prefix):].strip()
    match = _DATE_RE.fullmatch(value)
    if match is None:
        raise MalformedMessageError(HeaderState.TIME.name, f"unrecognized date {value!r}")
    try:
        return datetime.strptime(match.group("stamp"), _DATE_FORMAT)
    except ValueError as exc:
        raise MalformedMessageError(HeaderState.TIME.name, str(exc)) from exc


def _extract_from(line: str) -> str:
    value = _value(line)
    if not value:
        raise MalformedMessageError(HeaderState.FROM.name, "empty sender")
    return value


def _extract_to(line: str) -> tuple[str, ...]:
    tokens = [t.strip() for t in _TO_SPLIT_RE.split(line)]
    tokens = [t for t in tokens if t != _TO_LABEL]
    if tokens == [""]:
        return ()
    if "" in tokens:
        raise MalformedMessageError(HeaderState.TO.name, "empty entry in recipient list")
    return tuple(tokens)


def _extract_subject(line: str) -> str:
    return _value(line)


_EXTRACTORS: dict[HeaderState, tuple[str, Callable[[str], Any]]] = {
    HeaderState.START: ("message_id", _extract_message_id),
    HeaderState.TIME: ("sent_time", _extract_time),
    HeaderState.FROM: ("from_address", _extract_from),
    HeaderState.TO: ("to", _extract_to),
    HeaderState.SUBJECT: ("subject", _extract_subject),
}


def split_lines(text: str) -> list[str]:
    """Split message text on ``\\r\\n``, ``\\r`` or ``\\n`` only."""
    return _LINE_END_RE.split(text)


def unfold_headers(lines: Iterable[str]) -> list[str]:
    """Join folded continuation lines onto the header line they continue.

    Returns the header block only: everything from the first blank line
    on is dropped.
    """
    header: list[str] = []
    for line in lines:
        if not line.strip():
            break
        if line[0] in " \t" and header:
            header[-1] = f"{header[-1].rstrip()} {line.strip()}"
        else:
            header.append(line)
    return header


class HeaderParser:
    """Extract a :class:`Message` from the lines of one message."""

    def __init__(
        self,
        policy: HeaderPolicy = HeaderPolicy.STRICT,
        *,
        unfold: bool = False,
    ) -> None:
        self._policy = HeaderPolicy(policy)
        self._unfold = unfold

    @property
    def policy(self) -> HeaderPolicy:
        return self._policy

    def parse(self, lines: Iterable[str]) -> Message | None:
        """Return the extracted message, or ``None`` if it is malformed."""
        try:
            return self.extract(lines)
        except MalformedMessageError:
            return None

    def parse_text(self, text: str) -> Message | None:
        return self.parse(split_lines(text))

    def extract(self, lines: Iterable[str]) -> Message:
        """Return the extracted message or raise :class:`MalformedMessageError`."""
        if self._unfold:
            lines = unfold_headers(lines)

        if self._policy is HeaderPolicy.STRICT:
            fields = self._scan_strict(lines)
        else:
            fields = self._scan_lenient(lines)

        try:
            return Message(**fields)
        except ValidationError as exc:
            raise MalformedMessageError(HeaderState.END.name, str(exc)) from exc

    # ------------------------------------------------------------------
    # Policies
    # ------------------------------------------------------------------

    @staticmethod
    def _scan_strict(lines: Iterable[str]) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        state = HeaderState.START

        for line in lines:
            if state is HeaderState.END:
                break
            if not line.startswith(state.prefix):
                raise MalformedMessageError(state.name, f"expected {state.prefix!r} header")
            name, extract = _EXTRACTORS[state]
            fields[name] = extract(line)
            state = _NEXT_STATE[state]

        if state is not HeaderState.END:
            raise MalformedMessageError(state.name, "lines ran out before all headers were read")
        return fields

    @staticmethod
    def _scan_lenient(lines: Iterable[str]) -> dict[str, Any]:
        fields: dict[str, Any] = {}

        for line in lines:
            if not line.strip():
                break
            for state in _REQUIRED:
                name, extract = _EXTRACTORS[state]
                if name not in fields and line.startswith(state.prefix):
                    fields[name] = extract(line)
                    break

        for state in _REQUIRED:
            if _EXTRACTORS[state][0] not in fields:
                raise MalformedMessageError(state.name, f"missing {state.prefix!r} header")
        return fields
