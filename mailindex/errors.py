"""Exception hierarchy for the mail index."""

from __future__ import annotations


class MailIndexError(Exception):
    """Base class for every error raised by :mod:`mailindex`."""


class MalformedMessageError(MailIndexError):
    """Raised by the header parser when a message cannot be extracted.

    Never crosses the public boundary: the indexer counts the message as
    skipped and carries on.
    """

    def __init__(self, state: str, reason: str) -> None:
        super().__init__(f"{state}: {reason}")
        self.state = state
        self.reason = reason


class InvalidArgumentError(MailIndexError, ValueError):
    """Raised when a public call receives an out-of-range argument."""


class AddressNotFoundError(MailIndexError, KeyError):
    """Raised by ``search`` for an address that was never indexed."""

    def __init__(self, address: str) -> None:
        super().__init__(address)
        self.address = address

    def __str__(self) -> str:
        return f"address not indexed: {self.address}"
