"""Search service orchestration layer.

Wraps a ``SearchEngine`` with the locking, logging, metrics and tracing a
hosting process needs. The hosting process (IPC registration, request
dispatch) calls ``index``, ``deindex`` and ``search`` here and never touches
the engine directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

import numpy as np

from librarian_search.adapters.library import AbstractLibrary
from librarian_search.config import Settings
from librarian_search.domain.model import Doc, DocId
from librarian_search.observability.context import reset_trace_context, update_trace_context
from librarian_search.observability.metrics import (
    INDEX_DOC_COUNT,
    OPERATION_COUNT,
    SEARCH_LATENCY,
    SEARCH_RESULTS,
    track_latency,
)
from librarian_search.observability.tracing import create_span
from librarian_search.search.engine import SearchEngine
from librarian_search.search.stats import IndexStats
from librarian_search.service_layer.locks import ReadWriteLock


if TYPE_CHECKING:
    from collections.abc import Generator


logger = logging.getLogger(__name__)


class SearchService:
    """High-level search service with single-writer, multi-reader access."""

    def __init__(
        self,
        engine: SearchEngine | None = None,
        *,
        settings: Settings | None = None,
        lock: ReadWriteLock | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            engine: Engine to serve; built from ``settings`` when omitted
            settings: Configuration; loaded from the environment when omitted
            lock: Lock guarding the engine, shared if several services wrap it
        """
        self.settings = settings if settings is not None else Settings()  # type: ignore[call-arg]
        if engine is None:
            engine = SearchEngine(
                gram_length=self.settings.gram_length,
                field_boosts=self.settings.field_boosts,
            )
        self.engine = engine
        self._lock = lock if lock is not None else ReadWriteLock()

    @classmethod
    def from_settings(cls, settings: Settings) -> SearchService:
        return cls(settings=settings)

    @contextmanager
    def _operation(self, name: str, **attributes: Any) -> Generator[None, None, None]:
        token = update_trace_context(operation=name)
        status = "ok"
        try:
            with create_span(f"librarian.{name}", attributes=attributes):
                yield
        except Exception:
            status = "error"
            raise
        finally:
            reset_trace_context(token)
            if self.settings.metrics_enabled:
                OPERATION_COUNT.labels(operation=name, status=status).inc()

    def _publish_counts(self) -> None:
        if not self.settings.metrics_enabled:
            return
        for field, index in self.engine.fields.items():
            INDEX_DOC_COUNT.labels(field=field).set(index.total_documents)

    def index(self, doc_id: DocId, document: Doc | Mapping[str, Any]) -> DocId:
        """Add ``document`` to the index and return ``doc_id`` unchanged."""
        doc = document if isinstance(document, Doc) else Doc.model_validate(document)
        with self._operation("index"):
            with self._lock.write():
                self.engine.index(doc_id, doc)
                self._publish_counts()
        return doc_id

    def deindex(self, doc_id: DocId) -> None:
        with self._operation("deindex"):
            with self._lock.write():
                removed = self.engine.deindex(doc_id)
                self._publish_counts()
        if not removed:
            logger.warning("Deindex requested for unknown document %r; index counts left unchanged", doc_id)

    def reindex(self, doc_id: DocId, document: Doc | Mapping[str, Any]) -> DocId:
        """Replace whatever is indexed under ``doc_id`` with ``document``."""
        doc = document if isinstance(document, Doc) else Doc.model_validate(document)
        with self._operation("reindex"):
            with self._lock.write():
                self.engine.reindex(doc_id, doc)
                self._publish_counts()
        return doc_id

    def search(self, query: str, limit: int | None = None) -> list[tuple[DocId, float]]:
        """Return ranked ``(doc_id, score)`` pairs with 32-bit scores.

        ``limit`` defaults to the configured search limit and is clamped to
        the configured maximum.
        """
        resolved_limit = self.settings.clamp_limit(limit)
        with self._operation("search", limit=resolved_limit, query_length=len(query)):
            with track_latency(SEARCH_LATENCY, operation="search"):
                with self._lock.read():
                    ranked = self.engine.search(query, resolved_limit)

            if self.settings.metrics_enabled:
                SEARCH_RESULTS.labels(operation="search").observe(len(ranked))

        logger.debug("Search for %d-char query returned %d results", len(query), len(ranked))
        scores = np.asarray([entry.score for entry in ranked], dtype=np.float32).tolist()
        return [(entry.doc_id, score) for entry, score in zip(ranked, scores, strict=True)]

    def rebuild(self, library: AbstractLibrary) -> int:
        """Clear the index and repopulate it from ``library``.

        Documents are read and validated before the index is touched, so a
        failing library leaves the previous index in place.
        """
        with self._operation("rebuild"):
            documents = list(library.iter_documents())
            with self._lock.write():
                self.engine.clear()
                for doc_id, doc in documents:
                    self.engine.index(doc_id, doc)
                self._publish_counts()

        logger.info("Rebuilt search index with %d documents", len(documents))
        return len(documents)

    def compact(self) -> int:
        """Drop posting lists emptied by removals."""
        with self._operation("compact"):
            with self._lock.write():
                pruned = self.engine.prune()
        logger.info("Pruned %d empty posting lists", pruned)
        return pruned

    def stats(self) -> dict[str, IndexStats]:
        with self._lock.read():
            return self.engine.stats()
