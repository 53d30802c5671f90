"""Multi-field trigram search over title, authors and keywords."""

from __future__ import annotations

from collections.abc import Mapping
import heapq
import logging
from typing import Any, NamedTuple

from librarian_search.domain.model import Doc, DocId
from librarian_search.search.gram_index import GramIndex
from librarian_search.search.grams import DEFAULT_GRAM_LENGTH, normalize, normalize_many
from librarian_search.search.stats import IndexStats


logger = logging.getLogger(__name__)

TITLE = "title"
AUTHORS = "authors"
KEYWORDS = "keywords"
FIELDS: tuple[str, ...] = (TITLE, AUTHORS, KEYWORDS)


class RankedDocument(NamedTuple):
    """A ``(doc_id, score)`` pair produced by the search engine."""

    doc_id: DocId
    score: float


def _ranking_key(item: tuple[DocId, float]) -> tuple[float, Any]:
    doc_id, score = item
    return (-score, doc_id)


def rank(scores: Mapping[DocId, float], limit: int) -> list[RankedDocument]:
    """Order ``scores`` by descending score, ties by ascending id, and truncate.

    Document ids must be mutually comparable for the tie-break.
    """

    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    if limit == 0 or not scores:
        return []
    if limit < len(scores):
        top_items = heapq.nsmallest(limit, scores.items(), key=_ranking_key)
    else:
        top_items = sorted(scores.items(), key=_ranking_key)
    return [RankedDocument(doc_id=doc_id, score=score) for doc_id, score in top_items]


def _coerce_doc(document: Doc | Mapping[str, Any]) -> Doc:
    if isinstance(document, Doc):
        return document
    return Doc.model_validate(document)


class SearchEngine:
    """Compose one ``GramIndex`` per field into a single ranked search.

    Fields are weighted equally unless ``field_boosts`` says otherwise.
    """

    def __init__(
        self,
        *,
        gram_length: int = DEFAULT_GRAM_LENGTH,
        field_boosts: Mapping[str, float] | None = None,
    ) -> None:
        unknown = set(field_boosts or {}) - set(FIELDS)
        if unknown:
            raise ValueError(f"Unknown fields in boosts: {sorted(unknown)}")

        self.gram_length = gram_length
        self.field_boosts = {name: 1.0 for name in FIELDS}
        self.field_boosts.update(field_boosts or {})
        self.title = GramIndex(gram_length)
        self.authors = GramIndex(gram_length)
        self.keywords = GramIndex(gram_length)

    @property
    def fields(self) -> dict[str, GramIndex]:
        return {TITLE: self.title, AUTHORS: self.authors, KEYWORDS: self.keywords}

    def __contains__(self, doc_id: object) -> bool:
        return self.title.contains_document(doc_id)

    def __len__(self) -> int:
        return len(self.title.document_ids())

    def index(self, doc_id: DocId, document: Doc | Mapping[str, Any]) -> DocId:
        """Index ``document`` under ``doc_id`` in every field and return the id.

        Authors and keywords are each indexed as one grouped document.
        """
        doc = _coerce_doc(document)
        title = normalize(doc.title)
        authors = normalize_many(doc.authors)
        keywords = normalize_many(doc.keywords)

        self.title.insert(doc_id, title)
        self.authors.insert_many(doc_id, authors)
        self.keywords.insert_many(doc_id, keywords)
        logger.debug(
            "Indexed %r (title=%d bytes, authors=%d, keywords=%d)",
            doc_id,
            len(title),
            len(authors),
            len(keywords),
        )
        return doc_id

    def deindex(self, doc_id: DocId) -> bool:
        """Remove ``doc_id`` from every field; False if it was not indexed."""
        removed = [index.remove(doc_id) for index in self.fields.values()]
        return any(removed)

    def reindex(self, doc_id: DocId, document: Doc | Mapping[str, Any]) -> DocId:
        doc = _coerce_doc(document)
        self.deindex(doc_id)
        return self.index(doc_id, doc)

    def field_scores(self, query: str) -> dict[str, dict[DocId, float]]:
        """Per-field scores for ``query`` before boosting and merging."""
        text = normalize(query)
        return {name: index.search(text) for name, index in self.fields.items()}

    def search(self, query: str, limit: int) -> list[RankedDocument]:
        """Return at most ``limit`` documents ranked by summed field scores."""
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        scores: dict[DocId, float] = {}
        for name, field_result in self.field_scores(query).items():
            boost = self.field_boosts[name]
            for doc_id, score in field_result.items():
                scores[doc_id] = scores.get(doc_id, 0.0) + score * boost

        return rank(scores, limit)

    def prune(self) -> int:
        return sum(index.prune() for index in self.fields.values())

    def clear(self) -> None:
        for index in self.fields.values():
            index.clear()

    def stats(self) -> dict[str, IndexStats]:
        return {name: index.stats() for name, index in self.fields.items()}
