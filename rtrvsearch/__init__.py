"""In-memory full-text indexing: documents, inverted index, fuzzy matching, caching and snapshots."""

__version__ = "0.1.0"

__all__ = [
    "document",
    "inverted_index",
    "persistence",
    "fuzzy_search",
    "query_cache",
]