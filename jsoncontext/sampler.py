"""Streaming extraction of sample records from JSON files."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterator, List

import ijson

from .logging import get_logger

logger = get_logger("sampler")


class SourceReadError(RuntimeError):
    """Raised when a source file cannot be opened or tokenized as JSON."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


def iter_records(path: str | Path, limit: int) -> Iterator[Dict[str, Any]]:
    """Yield up to ``limit`` JSON objects from ``path`` without loading the whole file.

    Tokens are scanned in document order and every token that does not open an
    object is skipped, so root arrays, a single root object and concatenated
    or line-delimited documents all produce records. Each yielded object is
    fully assembled, including nested objects.
    """
    if limit <= 0:
        return
    source = str(path)
    produced = 0
    try:
        with open(source, "rb") as handle:
            events = ijson.parse(handle, multiple_values=True, use_float=True)
            for _, event, value in events:
                if event != "start_map":
                    continue
                yield _build_object(events, value)
                produced += 1
                if produced >= limit:
                    return
    except OSError as exc:
        raise SourceReadError(source, exc.strerror or str(exc)) from exc
    except (ijson.JSONError, UnicodeDecodeError) as exc:
        raise SourceReadError(source, f"invalid JSON: {exc}") from exc


def sample_records(path: str | Path, limit: int) -> List[Dict[str, Any]]:
    """Return the sampled records as a list; the file is closed on return."""
    records = list(iter_records(path, limit))
    logger.debug("Sampled %d record(s) from %s (limit=%d)", len(records), path, limit)
    return records


def _build_object(events: Iterator[tuple], first_value: Any) -> Dict[str, Any]:
    builder = ijson.ObjectBuilder()
    builder.event("start_map", first_value)
    depth = 1
    for _, event, value in events:
        builder.event(event, value)
        if event in ("start_map", "start_array"):
            depth += 1
        elif event in ("end_map", "end_array"):
            depth -= 1
            if depth == 0:
                break
    return builder.value


__all__ = ["SourceReadError", "iter_records", "sample_records"]
