"""Shared test fixtures for the mail index test suite."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from mailindex.index import ParticipantIndex
from mailindex.models import Message
from mailindex.parser import HeaderParser

PDT = timezone(timedelta(hours=-7))


# ------------------------------------------------------------------
# Sample message builders
# ------------------------------------------------------------------


def build_message_text(
    *,
    message_id: str = "<18782981.1075855378110.JavaMail.evans@thyme>",
    date: str = "Mon, 14 May 2001 16:39:00 -0700 (PDT)",
    from_addr: str = "phillip.allen@enron.com",
    to: str | None = "tim.belden@enron.com",
    subject: str | None = "Forecast",
    body: str = "Here is our forecast",
) -> str:
    """Build an Enron-style message: canonical header order, blank line, body.

    Passing ``None`` for *to* or *subject* omits that header.
    """
    lines = [
        f"Message-ID: {message_id}",
        f"Date: {date}",
        f"From: {from_addr}",
    ]
    if to is not None:
        lines.append(f"To: {to}")
    if subject is not None:
        lines.append(f"Subject: {subject}")
    lines += [
        "Mime-Version: 1.0",
        "Content-Type: text/plain; charset=us-ascii",
        "Content-Transfer-Encoding: 7bit",
        "X-From: Phillip K Allen",
        "X-To: Tim Belden",
        "",
        body,
    ]
    return "\n".join(lines) + "\n"


def make_message(
    *,
    message_id: str = "<m@x.com>",
    from_address: str = "a@x.com",
    to: tuple[str, ...] = ("b@x.com",),
    subject: str = "Hi",
    sent_time: datetime = datetime(2001, 5, 1, 10, 0, tzinfo=PDT),
) -> Message:
    return Message(
        message_id=message_id,
        from_address=from_address,
        to=to,
        subject=subject,
        sent_time=sent_time,
    )


def write_maildir(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative_path: text}`` under *root* and return *root*."""
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="ascii")
    return root


@pytest.fixture
def parser() -> HeaderParser:
    return HeaderParser()


@pytest.fixture
def m1() -> Message:
    return make_message(
        message_id="<m1@x.com>",
        to=("b@x.com",),
        subject="Hi",
        sent_time=datetime(2001, 5, 1, 10, 0, tzinfo=PDT),
    )


@pytest.fixture
def m2() -> Message:
    return make_message(
        message_id="<m2@x.com>",
        to=("c@x.com",),
        subject="Re",
        sent_time=datetime(2001, 5, 2, 10, 0, tzinfo=PDT),
    )


@pytest.fixture
def index() -> ParticipantIndex:
    return ParticipantIndex(rng=random.Random(1234))


@pytest.fixture
def m1_text() -> str:
    return build_message_text(
        message_id="<m1@x.com>",
        date="Tue, 1 May 2001 10:00:00 -0700 (PDT)",
        from_addr="a@x.com",
        to="b@x.com",
        subject="Hi",
    )


@pytest.fixture
def m2_text() -> str:
    return build_message_text(
        message_id="<m2@x.com>",
        date="Wed, 2 May 2001 10:00:00 -0700 (PDT)",
        from_addr="a@x.com",
        to="c@x.com",
        subject="Re",
    )
