# rtrvsearch

Building blocks for a small, in-memory full-text search engine, in pure
Python with no third-party dependencies.

The package provides:

- **`rtrvsearch.document`**: the `Document` dataclass. It holds an `id`, a
  `fields` dict of named text values and an approximate `term_count`.
  `get_field(name)` returns a field's value or `""`. `get_all_text()` joins
  all field values with single spaces.
- **`rtrvsearch.inverted_index`**: a thread-safe `InvertedIndex` that maps
  terms to `PostingList`s of `Posting`s. Each list has lazily built
  `SkipPointer`s. `intersect_with_skips` performs an AND intersection that
  uses those skip pointers.
- **`rtrvsearch.fuzzy_search`**: `FuzzySearch`, which combines a character
  bigram index with a bounded Damerau-Levenshtein distance and returns
  `FuzzyMatch` results. The module also provides `extract_ngrams`,
  `damerau_levenshtein_distance` and `auto_max_edit_distance`.
- **`rtrvsearch.query_cache`**: `QueryCache`, an LRU cache with an optional
  time to live. It reports hit, miss and eviction counters as
  `CacheStatistics`.
- **`rtrvsearch.persistence`**: `save_snapshot` and `load_snapshot`, which
  read and write a binary snapshot of documents and the index. Failures
  raise `SnapshotError`.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Documents

```python
from rtrvsearch.document import Document

doc = Document(1, {"title": "Notes", "content": "hello world"}, term_count=3)
print(doc.get_field("title"))    # Notes
print(doc.get_field("missing"))  # ""
print(doc.get_all_text())        # Notes hello world
```

## Indexing and intersecting postings

```python
from rtrvsearch.inverted_index import InvertedIndex, intersect_with_skips

index = InvertedIndex()
for doc_id in range(1, 101):
    index.add_term("common", doc_id, 1)
for doc_id in range(50, 151, 10):
    index.add_term("rare", doc_id, 1)

print(index.document_frequency("common"))   # 100
print("rare" in index, len(index))          # True 2

common = index.posting_list("common")       # a copy, skip pointers rebuilt if stale
rare = index.posting_list("rare")
print(intersect_with_skips(common, rare))   # [50, 60, 70, 80, 90, 100]

index.remove_document(60)                   # terms left without postings are dropped
```

### Adding terms

`add_term(term, doc_id, position=0)` works as follows:

- It counts one occurrence of the term in the document.
- A position greater than 0 is also recorded in the posting.
- A position of 0 is counted but not recorded.

### Reading the index

- `postings(term)` returns copies of the postings, or an empty list for an
  unknown term.
- `vocabulary()` returns the set of indexed terms.
- `items()` returns copies of every term and its posting list.

### Skip pointers

- `rebuild_skip_pointers()` rebuilds the skip pointers of every term.
- `rebuild_skip_pointers(term)` rebuilds those of one term.
- `PostingList.build_skip_pointers(interval)` places a pointer every
  `interval` postings. An interval of 0 uses the square root of the list
  length.

## Fuzzy term matching

```python
from rtrvsearch.fuzzy_search import FuzzySearch, damerau_levenshtein_distance

fuzzy = FuzzySearch()
fuzzy.build_ngram_index(index.vocabulary())
fuzzy.add_term("learning")

for match in fuzzy.find_matches("lerning"):   # distance chosen from the term length
    print(match.matched_term, match.edit_distance)

print(damerau_levenshtein_distance("abcd", "abdc", 2))  # 1 (one transposition)
```

### `find_matches(term, max_edit_distance=0, max_candidates=50)`

Results are sorted by edit distance, then alphabetically. With a
`max_edit_distance` of 0, the limit is chosen from the term's length:

| Term length | Edit distance allowed |
|---|---|
| up to 2 characters | exact match only |
| up to 4 characters | 1 |
| longer | 2 |

## Caching query results

```python
from rtrvsearch.query_cache import QueryCache

cache = QueryCache(max_entries=100, ttl=30.0)
cache.put(("machine learning", 10), ["result-a", "result-b"])
print(cache.get(("machine learning", 10)))   # ['result-a', 'result-b']
print(cache.get("unknown"))                  # None
print(cache.stats().hit_rate)                # 0.5
```

Keys can be any hashable value.

- **Capacity**: the cache keeps the most recently used entries up to
  `max_entries` (default 1000).
- **Expiry**: entries older than `ttl` seconds (default 60) count as misses
  and are removed. A `ttl` of zero or less disables expiry.
- **Changing limits**: `resize` changes the capacity and evicts the least
  recently used entries if needed. `set_ttl` changes the time to live.
- **Clearing**: `clear` drops all entries but keeps the counters.

## Snapshots

```python
from rtrvsearch.persistence import SnapshotError, load_snapshot, save_snapshot

save_snapshot("index.bin", {doc.id: doc}, index, next_doc_id=2)
try:
    snapshot = load_snapshot("index.bin")
except SnapshotError as exc:
    print(exc)
else:
    print(snapshot.next_doc_id, len(snapshot.documents), len(snapshot.index))
```

### What is saved

A snapshot stores:

- every document, with its fields and term count;
- the next document id;
- every posting, with its term frequency and positions.

### Loading

`load_snapshot` returns a `Snapshot` with `documents`, `index` and
`next_doc_id`. The index is rebuilt from the recorded positions, which has
two consequences:

- A posting's term frequency becomes its number of positions.
- Postings indexed without positions are not restored.

### Errors

`SnapshotError` is raised for:

- a file that cannot be read or written;
- the wrong signature or version;
- truncated data.

## What this package does not do

This package only provides the pieces listed above. It does not:

- read documents from JSON Lines, CSV or other files;
- tokenize text, rank results or parse queries;
- provide a search engine object that ties these pieces together;
- offer a command-line tool, an interactive shell or an HTTP server.