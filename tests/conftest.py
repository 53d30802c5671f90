"""Shared test fixtures and configuration."""

import os

import pytest

from librarian_search.domain.model import Doc
from librarian_search.search.engine import SearchEngine


# Pin every setting so a developer's environment or .env cannot leak into tests
TEST_ENV = {
    "LIBRARIAN_GRAM_LENGTH": "3",
    "LIBRARIAN_TITLE_BOOST": "1.0",
    "LIBRARIAN_AUTHORS_BOOST": "1.0",
    "LIBRARIAN_KEYWORDS_BOOST": "1.0",
    "LIBRARIAN_DEFAULT_SEARCH_LIMIT": "20",
    "LIBRARIAN_MAX_SEARCH_LIMIT": "1000",
    "LIBRARIAN_SERVICE_NAME": "librarian-search-test",
    "LIBRARIAN_LOG_LEVEL": "debug",
    "LIBRARIAN_LOG_JSON": "false",
    "LIBRARIAN_METRICS_ENABLED": "true",
}

for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset test defaults before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def systems_doc() -> Doc:
    return Doc(title="Systems Programming", authors=("Alice",), keywords=("storage",))


@pytest.fixture
def network_doc() -> Doc:
    return Doc(title="Network Programming", authors=("Bob",), keywords=("sockets",))


@pytest.fixture
def garden_doc() -> Doc:
    return Doc(title="Gardens of Stone", authors=("Carol",), keywords=("plants",))


@pytest.fixture
def engine(systems_doc, network_doc) -> SearchEngine:
    """Engine holding the two programming books under ids 1 and 2."""
    search_engine = SearchEngine()
    search_engine.index(1, systems_doc)
    search_engine.index(2, network_doc)
    return search_engine
