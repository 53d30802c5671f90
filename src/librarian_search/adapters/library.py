"""Library abstractions feeding documents into the search engine.

The library layer owns document storage and identifiers. The search core
only ever sees ``(doc_id, Doc)`` pairs, which is all a full rebuild needs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
import logging
from typing import Any

from librarian_search.domain.model import Doc, DocId


logger = logging.getLogger(__name__)


class AbstractLibrary(ABC):
    """Abstract source of indexable documents."""

    @abstractmethod
    def iter_documents(self) -> Iterator[tuple[DocId, Doc]]:
        """Yield every known document with its identifier."""
        raise NotImplementedError

    def get(self, doc_id: DocId) -> Doc | None:
        """Optional point lookup; the default scans ``iter_documents``."""

        for candidate_id, doc in self.iter_documents():
            if candidate_id == doc_id:
                return doc
        return None


class InMemoryLibrary(AbstractLibrary):
    """Dictionary-backed library, mostly useful for tests and embedding."""

    def __init__(self, documents: Mapping[DocId, Doc | Mapping[str, Any]] | None = None) -> None:
        self._documents: dict[DocId, Doc] = {}
        for doc_id, doc in (documents or {}).items():
            self.add(doc_id, doc)

    def __len__(self) -> int:
        return len(self._documents)

    def add(self, doc_id: DocId, document: Doc | Mapping[str, Any]) -> Doc:
        doc = document if isinstance(document, Doc) else Doc.model_validate(document)
        self._documents[doc_id] = doc
        return doc

    def discard(self, doc_id: DocId) -> bool:
        return self._documents.pop(doc_id, None) is not None

    def get(self, doc_id: DocId) -> Doc | None:
        return self._documents.get(doc_id)

    def iter_documents(self) -> Iterator[tuple[DocId, Doc]]:
        yield from list(self._documents.items())
