"""Consistency audit for a live search engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import logging
import time

from librarian_search.search.engine import SearchEngine


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FieldAudit:
    """Audit result for a single field index."""

    field: str
    total_documents: float
    distinct_documents: int
    gram_count: int
    empty_postings: int

    @property
    def drifted(self) -> bool:
        # Re-indexing an id without deindexing counts it twice
        return self.total_documents != self.distinct_documents


@dataclass(slots=True)
class IndexAuditReport:
    """Structured result for an engine audit."""

    fields: list[FieldAudit]
    mismatched_documents: list[str] = field(default_factory=list)
    duration_s: float = 0.0

    @property
    def status(self) -> str:
        if self.mismatched_documents or any(item.drifted for item in self.fields):
            return "drift"
        return "ok"

    @property
    def empty_postings(self) -> int:
        return sum(item.empty_postings for item in self.fields)

    def to_dict(self) -> dict[str, object]:
        payload = asdict(self)
        payload["status"] = self.status
        payload["empty_postings"] = self.empty_postings
        return payload


def audit_engine(engine: SearchEngine) -> IndexAuditReport:
    """Check that every field counts the same documents it holds.

    All field indexes are written together, so the same ids must appear in
    each of them. Ids present in only some fields are reported by ``repr``.
    """

    start = time.perf_counter()
    fields: list[FieldAudit] = []
    id_sets = []
    for name, index in engine.fields.items():
        stats = index.stats()
        fields.append(
            FieldAudit(
                field=name,
                total_documents=stats.total_documents,
                distinct_documents=stats.distinct_documents,
                gram_count=stats.gram_count,
                empty_postings=stats.empty_postings,
            )
        )
        id_sets.append(set(index.document_ids()))

    everywhere = set.intersection(*id_sets) if id_sets else set()
    anywhere = set.union(*id_sets) if id_sets else set()
    mismatched = sorted(repr(doc_id) for doc_id in anywhere - everywhere)

    report = IndexAuditReport(
        fields=fields,
        mismatched_documents=mismatched,
        duration_s=time.perf_counter() - start,
    )
    if report.status != "ok":
        logger.warning("Index audit found drift: %s", report.to_dict())
    return report
