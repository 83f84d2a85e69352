"""In-memory mirror of the documents open in the editor."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

logger = logging.getLogger(__name__)

__all__ = ["ReadWriteLock", "DocumentStore"]


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Waiting writers block new readers, so a steady stream of reads cannot
    starve a write.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class DocumentStore:
    """Maps document URIs to their current full text.

    The server works in full sync mode: every change replaces the whole
    document. Readers always see a complete snapshot.
    """

    def __init__(self) -> None:
        self._documents: dict[str, str] = {}
        self._lock = ReadWriteLock()

    def open(self, uri: str, text: str) -> None:
        with self._lock.write():
            self._documents[uri] = text
        logger.debug(f"Opened {uri} ({len(text)} characters)")

    def change(self, uri: str, changes: Sequence[Any]) -> bool:
        """Replace a document's text with the first change in a batch.

        Only whole-document changes are accepted. Any further entries in
        the batch are ignored.

        Args:
            uri: Document URI
            changes: Content change events from a didChange notification

        Returns:
            True if the stored text was replaced
        """
        if not changes:
            return False

        first = changes[0]
        if getattr(first, "range", None) is not None:
            logger.warning(f"Ignoring incremental change for {uri}: server requires full sync")
            return False

        with self._lock.write():
            if uri not in self._documents:
                logger.debug(f"Ignoring change for unopened document {uri}")
                return False
            self._documents[uri] = first.text
        return True

    def close(self, uri: str) -> None:
        with self._lock.write():
            self._documents.pop(uri, None)
        logger.debug(f"Closed {uri}")

    def get(self, uri: str) -> str | None:
        """Return the current text of ``uri``, or None if it isn't open."""
        with self._lock.read():
            return self._documents.get(uri)

    def clear(self) -> None:
        with self._lock.write():
            self._documents.clear()

    def __contains__(self, uri: object) -> bool:
        with self._lock.read():
            return uri in self._documents

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._documents)
