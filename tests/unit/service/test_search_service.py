"""Unit tests for the search service facade."""

import logging
from unittest.mock import Mock

import numpy as np
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from prometheus_client import REGISTRY
from pydantic import ValidationError
import pytest

from librarian_search.adapters.library import InMemoryLibrary
from librarian_search.config import Settings
from librarian_search.domain.model import Doc
from librarian_search.observability import tracing as tracing_module
from librarian_search.observability.context import get_trace_context
from librarian_search.search.engine import SearchEngine
from librarian_search.service_layer.search_service import SearchService


def _operation_count(operation: str, status: str) -> float:
    value = REGISTRY.get_sample_value(
        "librarian_operations_total",
        {"operation": operation, "status": status},
    )
    return value or 0.0


@pytest.fixture
def library(systems_doc, network_doc, garden_doc) -> InMemoryLibrary:
    return InMemoryLibrary({1: systems_doc, 2: network_doc, 3: garden_doc})


@pytest.fixture
def service(library) -> SearchService:
    search_service = SearchService(settings=Settings())
    search_service.rebuild(library)
    return search_service


@pytest.fixture
def span_exporter():
    exporter = InMemorySpanExporter()
    tracing_module.init_tracing("librarian-search-test", span_processors=[SimpleSpanProcessor(exporter)])
    yield exporter
    exporter.clear()
    tracing_module._tracer_holder["tracer"] = None
    tracing_module._tracer_holder["provider"] = None


def test_from_settings_uses_configured_engine_shape():
    service = SearchService.from_settings(Settings(gram_length=4, title_boost=2.0))

    assert service.engine.gram_length == 4
    assert service.engine.field_boosts["title"] == 2.0


def test_rebuild_indexes_every_library_document(service, library):
    assert len(service.engine) == len(library)
    assert {entry[0] for entry in service.search("programming", 10)} == {1, 2}


def test_rebuild_replaces_previous_index(service, systems_doc):
    count = service.rebuild(InMemoryLibrary({10: systems_doc}))

    assert count == 1
    assert [doc_id for doc_id, _ in service.search("programming", 10)] == [10]


def test_rebuild_failure_keeps_previous_index(service):
    broken = Mock()
    broken.iter_documents.side_effect = RuntimeError("library offline")

    with pytest.raises(RuntimeError, match="library offline"):
        service.rebuild(broken)

    assert len(service.engine) == 3


def test_search_returns_float32_scores(service):
    results = service.search("programming", 10)

    assert results
    for doc_id, score in results:
        assert isinstance(score, float)
        assert score == float(np.float32(score))
        assert score > 0


def test_search_uses_default_and_max_limits(library):
    service = SearchService(settings=Settings(default_search_limit=1, max_search_limit=2))
    service.rebuild(library)
    for doc_id in (4, 5, 6):
        service.index(doc_id, {"title": "Programming Pearls"})

    assert len(service.search("programming")) == 1
    assert len(service.search("programming", 50)) == 2
    assert service.search("programming", 0) == []


def test_index_and_deindex_round_trip(service):
    doc_id = service.index(99, Doc(title="Compilers", authors=("Aho",)))

    assert doc_id == 99
    assert [entry[0] for entry in service.search("compilers", 5)] == [99]

    service.deindex(99)

    assert service.search("compilers", 5) == []


def test_index_rejects_invalid_documents_before_touching_the_engine(service):
    before = service.stats()["title"].total_documents

    with pytest.raises(ValidationError):
        service.index(7, {"title": 123})

    assert service.stats()["title"].total_documents == before


def test_deindex_unknown_document_logs_warning(service, caplog):
    with caplog.at_level(logging.WARNING, logger="librarian_search.service_layer.search_service"):
        service.deindex(404)

    assert "unknown document 404" in caplog.text
    assert service.stats()["title"].total_documents == 3.0


def test_reindex_updates_content(service):
    service.reindex(3, {"title": "Stone Soup Recipes"})

    assert [entry[0] for entry in service.search("recipes", 5)] == [3]
    assert service.stats()["title"].total_documents == 3.0


def test_compact_prunes_empty_postings(service):
    service.deindex(3)

    pruned = service.compact()

    assert pruned > 0
    assert all(item.empty_postings == 0 for item in service.stats().values())


def test_operations_are_counted(service):
    before = _operation_count("search", "ok")

    service.search("programming", 5)

    assert _operation_count("search", "ok") == before + 1


def test_failed_operations_are_counted_as_errors():
    engine = Mock(spec=SearchEngine)
    engine.search.side_effect = RuntimeError("boom")
    service = SearchService(engine, settings=Settings())
    before = _operation_count("search", "error")

    with pytest.raises(RuntimeError, match="boom"):
        service.search("anything", 5)

    assert _operation_count("search", "error") == before + 1


def test_metrics_can_be_disabled(library):
    service = SearchService(settings=Settings(metrics_enabled=False))
    before = _operation_count("rebuild", "ok")

    service.rebuild(library)

    assert _operation_count("rebuild", "ok") == before


def test_document_count_gauge_tracks_writes(service):
    service.index(50, {"title": "Another Book"})

    value = REGISTRY.get_sample_value("librarian_index_document_count", {"field": "title"})
    assert value == 4.0


def test_operations_emit_spans(service, span_exporter):
    service.search("programming", 3)

    spans = span_exporter.get_finished_spans()
    assert [span.name for span in spans] == ["librarian.search"]
    assert spans[0].attributes["limit"] == 3


def test_operation_context_is_cleared_after_each_call(service):
    service.search("programming", 5)

    assert "operation" not in get_trace_context()
    assert "trace_id" not in get_trace_context()


def test_operation_context_is_cleared_after_failures():
    engine = Mock(spec=SearchEngine)
    engine.search.side_effect = RuntimeError("boom")
    service = SearchService(engine, settings=Settings())

    with pytest.raises(RuntimeError):
        service.search("anything", 5)

    assert get_trace_context() == {}


def test_log_records_inside_operations_carry_the_operation(service, span_exporter):
    seen = {}

    def capture(query, limit):
        seen.update(get_trace_context())
        return []

    service.engine.search = capture
    service.search("programming", 5)

    span = span_exporter.get_finished_spans()[0]
    assert seen["operation"] == "search"
    assert seen["span_id"] == format(span.context.span_id, "016x")
