"""Mail index: parse plain-text email headers and query them by participant.

Public API re-exported here for convenience::

    from mailindex import MailIndexer, iter_maildir
"""

from .config import IndexerConfig
from .errors import (
    AddressNotFoundError,
    InvalidArgumentError,
    MailIndexError,
    MalformedMessageError,
)
from .index import ParticipantIndex
from .indexer import MailIndexer
from .logging import setup_logging
from .models import HeaderPolicy, IngestReport, Message
from .parser import HeaderParser, HeaderState, split_lines, unfold_headers
from .source import iter_maildir

__all__ = [
    "AddressNotFoundError",
    "HeaderParser",
    "HeaderPolicy",
    "HeaderState",
    "IndexerConfig",
    "IngestReport",
    "InvalidArgumentError",
    "MailIndexError",
    "MailIndexer",
    "MalformedMessageError",
    "Message",
    "ParticipantIndex",
    "iter_maildir",
    "setup_logging",
    "split_lines",
    "unfold_headers",
]
