"""Reading project files as text with per-file failure isolation."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

from .config import DEFAULT_READ_CONCURRENCY
from .errors import FileReadError
from .logging import get_logger
from .models import FileRecord

_LOGGER = get_logger("loader")


def load_text(root: Path, relative: str) -> str:
    """Return the UTF-8 contents of ``root / relative``.

    Raises FileReadError for I/O failures and undecodable (binary) content.
    """
    path = root / relative
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FileReadError(relative, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise FileReadError(relative, exc.strerror or str(exc)) from exc


def _try_load(root: Path, record: FileRecord) -> Optional[str]:
    try:
        return load_text(root, record.path)
    except FileReadError as exc:
        _LOGGER.debug("Skipping file: %s", exc)
        return None


def load_many(
    root: Path,
    records: Sequence[FileRecord],
    concurrency: int = DEFAULT_READ_CONCURRENCY,
) -> Iterator[Tuple[FileRecord, str]]:
    """Yield ``(record, text)`` pairs in input order, skipping unreadable files."""
    if not records:
        return
    if concurrency <= 1 or len(records) == 1:
        for record in records:
            text = _try_load(root, record)
            if text is not None:
                yield record, text
        return

    workers = min(concurrency, len(records))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="webmap-read") as pool:
        # map() yields results in submission order, keeping enumeration order intact.
        for record, text in zip(records, pool.map(lambda item: _try_load(root, item), records)):
            if text is not None:
                yield record, text


__all__ = ["load_many", "load_text"]
