"""Indexer configuration loaded from environment variables.

Uses pydantic-settings so every field can be overridden via
``MAILINDEX_*`` env vars; command-line flags override those in turn.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from .models import HeaderPolicy

MAX_INGEST_COUNT = 100_000


class IndexerConfig(BaseSettings):
    """Settings for one ingestion run."""

    model_config = {"env_prefix": "MAILINDEX_"}

    max_messages: int = Field(
        default=MAX_INGEST_COUNT,
        ge=0,
        le=MAX_INGEST_COUNT,
        description="Maximum number of candidate files to ingest",
    )
    header_policy: HeaderPolicy = Field(
        default=HeaderPolicy.STRICT,
        description="strict: fixed header order; lenient: order-independent scan",
    )
    unfold_headers: bool = Field(
        default=False,
        description="Join folded continuation lines before parsing",
    )
    index_recipients: bool = Field(
        default=True,
        description="Index each message under its recipients as well as its sender",
    )
    workers: int = Field(default=1, ge=1, description="Header parser threads")
    file_suffix: str = Field(
        default="_",
        description="File name suffix that marks a candidate message file",
    )
    encoding: str = Field(default="ascii", description="Encoding used to decode message files")
    log_json: bool = Field(default=False, description="Emit JSON log lines")
    log_level: str = Field(default="INFO", description="Root log level name")
