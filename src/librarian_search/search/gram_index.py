"""Single-field inverted index over fixed-length byte shingles."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
import logging
from types import MappingProxyType

from librarian_search.domain.model import DocId
from librarian_search.search.grams import DEFAULT_GRAM_LENGTH, count_grams, iter_grams
from librarian_search.search.stats import IndexStats, inverse_document_frequency, normalized_frequency


logger = logging.getLogger(__name__)


class PostingList:
    """Occurrence counts of one gram per document, with a cached maximum."""

    __slots__ = ("_frequencies", "_max_frequency")

    def __init__(self) -> None:
        self._frequencies: dict[DocId, float] = {}
        self._max_frequency = 0.0

    def __len__(self) -> int:
        return len(self._frequencies)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._frequencies

    def __iter__(self) -> Iterator[DocId]:
        return iter(self._frequencies)

    @property
    def max_frequency(self) -> float:
        """Largest occurrence count in the list, or 1.0 while it is empty."""
        if not self._frequencies:
            return 1.0
        return self._max_frequency

    def frequency(self, doc_id: DocId) -> float:
        return self._frequencies.get(doc_id, 0.0)

    def items(self) -> Iterable[tuple[DocId, float]]:
        return self._frequencies.items()

    def as_mapping(self) -> Mapping[DocId, float]:
        return MappingProxyType(self._frequencies)

    def increase(self, doc_id: DocId, amount: float = 1.0) -> None:
        frequency = self._frequencies.get(doc_id, 0.0) + amount
        self._frequencies[doc_id] = frequency
        if frequency > self._max_frequency:
            self._max_frequency = frequency

    def decrease(self, doc_id: DocId, amount: float = 1.0) -> bool:
        """Lower ``doc_id``'s count, dropping the entry once it reaches zero.

        Returns False when ``doc_id`` has no entry.
        """
        current = self._frequencies.get(doc_id)
        if current is None:
            return False

        remaining = current - amount
        if remaining <= 0:
            del self._frequencies[doc_id]
        else:
            self._frequencies[doc_id] = remaining

        if current >= self._max_frequency:
            self._max_frequency = max(self._frequencies.values(), default=0.0)
        return True


class GramIndex:
    """Inverted index for one text field keyed by N-byte grams.

    Every ``insert``/``insert_many`` call counts as one document towards
    ``total_documents`` no matter how many grams it produced. The grams each
    call contributed are remembered per document so ``remove`` can withdraw
    exactly that contribution.
    """

    def __init__(self, gram_length: int = DEFAULT_GRAM_LENGTH) -> None:
        if isinstance(gram_length, bool) or not isinstance(gram_length, int) or gram_length < 1:
            raise ValueError(f"gram_length must be a positive integer, got {gram_length!r}")
        self._gram_length = gram_length
        self._grams: dict[bytes, PostingList] = {}
        self._total_documents = 0.0
        self._contributions: dict[DocId, list[Counter[bytes]]] = {}

    def __len__(self) -> int:
        return len(self._grams)

    def __contains__(self, gram: object) -> bool:
        return gram in self._grams

    @property
    def gram_length(self) -> int:
        return self._gram_length

    @property
    def total_documents(self) -> float:
        return self._total_documents

    def posting(self, gram: bytes) -> Mapping[DocId, float] | None:
        """Read-only view of the posting list for ``gram``, if one exists."""
        posting = self._grams.get(bytes(gram))
        if posting is None:
            return None
        return posting.as_mapping()

    def max_frequency(self, gram: bytes) -> float:
        posting = self._grams.get(bytes(gram))
        return posting.max_frequency if posting is not None else 1.0

    def document_ids(self) -> list[DocId]:
        return list(self._contributions)

    def contains_document(self, doc_id: DocId) -> bool:
        return doc_id in self._contributions

    def insert(self, doc_id: DocId, data: bytes) -> None:
        """Index a single text buffer as one document."""
        self._apply(doc_id, count_grams([data], self._gram_length))

    def insert_many(self, doc_id: DocId, buffers: Iterable[bytes]) -> None:
        """Index several text buffers together as one document.

        An empty ``buffers`` still counts as one document.
        """
        self._apply(doc_id, count_grams(buffers, self._gram_length))

    def _apply(self, doc_id: DocId, counts: Counter[bytes]) -> None:
        for gram, occurrences in counts.items():
            posting = self._grams.get(gram)
            if posting is None:
                posting = PostingList()
                self._grams[gram] = posting
            posting.increase(doc_id, float(occurrences))

        self._contributions.setdefault(doc_id, []).append(counts)
        self._total_documents += 1.0

    def remove(self, doc_id: DocId) -> bool:
        """Withdraw the most recent insert for ``doc_id``.

        Emptied posting lists stay in the index until ``prune``. Returns
        False, leaving the document count untouched, when ``doc_id`` was
        never inserted.
        """
        contributions = self._contributions.get(doc_id)
        if not contributions:
            logger.debug("Ignoring removal of unindexed document %r", doc_id)
            return False

        counts = contributions.pop()
        if not contributions:
            del self._contributions[doc_id]

        for gram, occurrences in counts.items():
            self._grams[gram].decrease(doc_id, float(occurrences))
        self._total_documents -= 1.0
        return True

    def search(self, data: bytes) -> dict[DocId, float]:
        """Accumulate a relevance score per document for every query gram.

        Repeated grams in ``data`` count once per occurrence. Documents in a
        matched posting list always get an entry, even when the gram's weight
        is zero.
        """
        scores: dict[DocId, float] = {}
        for gram in iter_grams(bytes(data), self._gram_length):
            posting = self._grams.get(gram)
            if not posting:
                continue

            idf = inverse_document_frequency(self._total_documents, len(posting))
            max_frequency = posting.max_frequency
            for doc_id, frequency in posting.items():
                scores[doc_id] = scores.get(doc_id, 0.0) + normalized_frequency(frequency, max_frequency) * idf
        return scores

    def prune(self) -> int:
        """Drop posting lists left empty by ``remove``; return how many."""
        empty = [gram for gram, posting in self._grams.items() if not posting]
        for gram in empty:
            del self._grams[gram]
        return len(empty)

    def clear(self) -> None:
        self._grams.clear()
        self._contributions.clear()
        self._total_documents = 0.0

    def stats(self) -> IndexStats:
        empty_postings = 0
        posting_count = 0
        for posting in self._grams.values():
            if not posting:
                empty_postings += 1
            posting_count += len(posting)
        return IndexStats(
            gram_length=self._gram_length,
            total_documents=self._total_documents,
            distinct_documents=len(self._contributions),
            gram_count=len(self._grams),
            empty_postings=empty_postings,
            posting_count=posting_count,
        )
