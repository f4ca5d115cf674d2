"""Append-only output buffer for a single PTY session."""

from __future__ import annotations

import threading


class OutputBuffer:
    """Thread-safe, ordered accumulator for terminal output chunks.

    Chunks are kept exactly as delivered: no reordering, no deduplication
    and no stripping of prompts or control sequences.
    """

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self._length: int = 0
        self._lock = threading.Lock()

    def append(self, chunk: str) -> None:
        """Append a chunk. Empty chunks are ignored."""
        if not chunk:
            return
        with self._lock:
            self._chunks.append(chunk)
            self._length += len(chunk)

    def read_all(self) -> str:
        """Return everything captured so far as one string."""
        with self._lock:
            return "".join(self._chunks)

    def __len__(self) -> int:
        with self._lock:
            return self._length
