"""Domain layer for librarian-search."""

from librarian_search.domain.model import Doc, DocId


__all__ = ["Doc", "DocId"]
