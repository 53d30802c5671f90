"""
In-memory n-gram search package.

This package provides the pure-Python search core:
- grams: Text normalization and fixed-length byte windows
- stats: Term-frequency damping and IDF-like weighting
- gram_index: Single-field inverted index over byte shingles
- engine: Multi-field search engine merging per-field scores
"""
