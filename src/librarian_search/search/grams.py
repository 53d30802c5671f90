"""Normalization and shingling helpers shared by indexing and querying.

Text is lower-cased and UTF-8 encoded before being cut into fixed-length
byte windows. Windows are taken over bytes rather than characters, so a
multi-byte character may straddle two grams; queries go through the same
path and therefore line up with the indexed grams.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator


DEFAULT_GRAM_LENGTH = 3


def normalize(text: str) -> bytes:
    """Return the lower-cased UTF-8 bytes used as index and query input."""

    return text.lower().encode("utf-8")


def normalize_many(texts: Iterable[str]) -> list[bytes]:
    return [normalize(text) for text in texts]


def iter_grams(data: bytes, gram_length: int) -> Iterator[bytes]:
    """Yield every ``gram_length`` window of ``data`` with stride 1.

    Inputs shorter than the window yield nothing.
    """

    for start in range(len(data) - gram_length + 1):
        yield data[start : start + gram_length]


def count_grams(buffers: Iterable[bytes], gram_length: int) -> Counter[bytes]:
    """Count gram occurrences across ``buffers``.

    Windows never span two buffers. Every buffer is checked before anything
    is counted, so a bad buffer fails the whole call.
    """

    checked: list[bytes] = []
    for data in buffers:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"expected a bytes-like buffer, got {type(data).__name__}")
        checked.append(bytes(data))

    counts: Counter[bytes] = Counter()
    for data in checked:
        counts.update(iter_grams(data, gram_length))
    return counts
