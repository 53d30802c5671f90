"""In-memory n-gram full-text search for a personal document library."""

from librarian_search.domain.model import Doc, DocId
from librarian_search.search.engine import RankedDocument, SearchEngine
from librarian_search.search.gram_index import GramIndex, PostingList


__all__ = ["Doc", "DocId", "GramIndex", "PostingList", "RankedDocument", "SearchEngine"]
