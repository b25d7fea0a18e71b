"""Data models for the mail index."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class HeaderPolicy(str, Enum):
    """How the header parser locates the required headers."""

    STRICT = "strict"
    LENIENT = "lenient"


class Message(BaseModel):
    """Structured record extracted from one message file.

    Frozen: a ``Message`` is built once by the header parser and never
    mutated afterwards.  ``from`` is a Python keyword, so the sender is
    stored as ``from_address`` and serialized under the ``from`` alias.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    message_id: str = Field(min_length=1, description="Opaque Message-ID value")
    from_address: str = Field(alias="from", min_length=1, description="Sender address")
    to: tuple[str, ...] = Field(description="Recipient addresses in header order")
    subject: str = Field(default="", description="Subject line, may be empty")
    sent_time: datetime = Field(description="Sent time with the source UTC offset")

    @field_validator("sent_time")
    @classmethod
    def require_offset(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("sent_time must carry a UTC offset")
        return v

    @property
    def participants(self) -> tuple[str, ...]:
        """Sender followed by each distinct recipient, without repeats."""
        return tuple(dict.fromkeys((self.from_address, *self.to)))

    def pretty(self) -> str:
        return (
            f"From: {self.from_address} To: {list(self.to)} "
            f"Subject: {self.subject} Time: {self.sent_time.isoformat()}"
        )


class IngestReport(BaseModel):
    """Counters returned by a completed ingestion pass."""

    read: int = Field(default=0, description="Items consumed from the source")
    indexed: int = Field(default=0, description="Messages inserted into the index")
    skipped: int = Field(default=0, description="Items rejected by the header parser")
