"""Statistical helpers for gram relevance scoring.

The functions here stay independent of the index layout so they can be
tested on their own. Every helper is total: zero or negative counts are
clamped so a score is always a finite number.
"""

from __future__ import annotations

from dataclasses import dataclass
import math


TF_FLOOR = 0.5


@dataclass(frozen=True)
class IndexStats:
    """Aggregated statistics for a single gram index."""

    gram_length: int
    total_documents: float
    distinct_documents: int
    gram_count: int
    empty_postings: int
    posting_count: int

    @property
    def live_grams(self) -> int:
        return self.gram_count - self.empty_postings


def normalized_frequency(frequency: float, max_frequency: float) -> float:
    """Return the damped term frequency in ``[0.5, 1.0]``.

    ``max_frequency`` below one is treated as one, and ``frequency`` is
    capped at it so a stale maximum can never push the weight past 1.0.
    """

    ceiling = max(max_frequency, 1.0)
    frequency = min(max(frequency, 0.0), ceiling)
    return TF_FLOOR + (1.0 - TF_FLOOR) * frequency / ceiling


def inverse_document_frequency(total_documents: float, document_count: int) -> float:
    """Return ``ln(total_documents / document_count)`` with guards.

    An index with no documents contributes nothing and ``document_count``
    is clamped to one. Callers keep ``total_documents`` at or above every
    posting list's document count, so the floor of the ratio at one is
    purely defensive.
    """

    if total_documents <= 0:
        return 0.0
    ratio = total_documents / max(document_count, 1)
    return math.log(max(ratio, 1.0))


def gram_score(frequency: float, max_frequency: float, total_documents: float, document_count: int) -> float:
    """Score contribution of one query gram for one document."""

    return normalized_frequency(frequency, max_frequency) * inverse_document_frequency(total_documents, document_count)
