"""Unit tests for the engine consistency audit."""

from librarian_search.domain.model import Doc
from librarian_search.index_audit import audit_engine
from librarian_search.search.engine import SearchEngine


def test_clean_engine_reports_ok(engine):
    report = audit_engine(engine)

    assert report.status == "ok"
    assert [item.field for item in report.fields] == ["title", "authors", "keywords"]
    assert report.mismatched_documents == []
    assert report.to_dict()["status"] == "ok"


def test_empty_engine_reports_ok():
    assert audit_engine(SearchEngine()).status == "ok"


def test_double_index_is_reported_as_drift(engine):
    engine.index(1, Doc(title="Systems Programming"))

    report = audit_engine(engine)

    assert report.status == "drift"
    assert all(item.drifted for item in report.fields)


def test_partially_indexed_document_is_reported(engine):
    engine.title.insert("orphan", b"orphan title")

    report = audit_engine(engine)

    assert report.status == "drift"
    assert report.mismatched_documents == ["'orphan'"]


def test_empty_postings_are_summed(engine):
    engine.deindex(2)

    report = audit_engine(engine)

    assert report.status == "ok"
    assert report.empty_postings == sum(item.empty_postings for item in report.fields)
    assert report.empty_postings > 0
