"""Unit tests for library adapters."""

from librarian_search.adapters.library import AbstractLibrary, InMemoryLibrary
from librarian_search.domain.model import Doc


class _ListLibrary(AbstractLibrary):
    def __init__(self, documents):
        self._documents = documents

    def iter_documents(self):
        yield from self._documents


def test_in_memory_library_validates_mappings():
    library = InMemoryLibrary({1: {"title": "Dune", "authors": ["Frank Herbert"]}})

    doc = library.get(1)
    assert isinstance(doc, Doc)
    assert doc.authors == ("Frank Herbert",)
    assert len(library) == 1


def test_in_memory_library_add_and_discard():
    library = InMemoryLibrary()
    library.add("a", Doc(title="A"))

    assert [doc_id for doc_id, _ in library.iter_documents()] == ["a"]
    assert library.discard("a") is True
    assert library.discard("a") is False
    assert library.get("a") is None


def test_iteration_tolerates_mutation_while_iterating():
    library = InMemoryLibrary({1: Doc(title="One"), 2: Doc(title="Two")})

    for doc_id, _ in library.iter_documents():
        library.discard(doc_id)

    assert len(library) == 0


def test_abstract_get_scans_documents():
    library = _ListLibrary([(1, Doc(title="One")), (2, Doc(title="Two"))])

    assert library.get(2).title == "Two"
    assert library.get(3) is None
