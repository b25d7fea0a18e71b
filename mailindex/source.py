"""Maildir corpus source: lazily yield ``(path, text)`` per candidate file."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import structlog

logger = structlog.get_logger()


def iter_maildir(
    root: str | os.PathLike[str],
    *,
    suffix: str = "_",
    encoding: str = "ascii",
) -> Iterator[tuple[str, str]]:
    """Walk *root* and yield ``(path, text)`` for each candidate message file.

    A candidate is a regular file whose name ends with *suffix* (the Enron
    maildir names messages ``1_``, ``2_``, ...).  Directories are visited
    in sorted order so runs over the same tree are reproducible.  Files
    that cannot be read or decoded are logged and skipped.

    *root* is checked eagerly; nothing else is read until iteration.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise NotADirectoryError(f"corpus root is not a directory: {root_path}")
    return _walk(root_path, suffix, encoding)


def _walk(root: Path, suffix: str, encoding: str) -> Iterator[tuple[str, str]]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            if not name.endswith(suffix):
                continue
            path = Path(dirpath, name)
            if not path.is_file():
                continue
            try:
                text = path.read_text(encoding=encoding)
            except UnicodeDecodeError as exc:
                logger.warning("source_file_undecodable", path=str(path), encoding=encoding, error=str(exc))
                continue
            except OSError as exc:
                logger.warning("source_file_unreadable", path=str(path), error=str(exc))
                continue
            yield str(path), text
