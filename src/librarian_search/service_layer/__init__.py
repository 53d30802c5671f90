"""Service layer wrapping the search engine for a hosting process."""

from librarian_search.service_layer.locks import ReadWriteLock
from librarian_search.service_layer.search_service import SearchService


__all__ = ["ReadWriteLock", "SearchService"]
