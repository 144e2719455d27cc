"""A thread-safe inverted index whose posting lists carry skip pointers."""

from __future__ import annotations

import math
import threading
from bisect import bisect_left
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import NamedTuple, Optional


@dataclass
class Posting:
    """One document's entry in a term's posting list."""

    doc_id: int
    term_frequency: int = 1
    positions: list[int] = field(default_factory=list)

    def _copy(self) -> Posting:
        return Posting(self.doc_id, self.term_frequency, list(self.positions))


class SkipPointer(NamedTuple):
    """A shortcut into a posting list: an index and the document id found there."""

    position: int
    doc_id: int


@dataclass
class PostingList:
    """The postings of one term, with lazily built skip pointers."""

    postings: list[Posting] = field(default_factory=list)
    skip_pointers: list[SkipPointer] = field(default_factory=list)
    _skips_dirty: bool = field(default=False, init=False, repr=False, compare=False)

    def add_posting(self, posting: Posting) -> None:
        """Append a posting and mark the skip pointers stale."""
        self.postings.append(posting)
        self._skips_dirty = True

    def build_skip_pointers(self, skip_interval: int = 0) -> None:
        """Place a skip pointer every ``skip_interval`` postings.

        An interval of 0 chooses the square root of the list length.
        """
        if skip_interval < 0:
            raise ValueError("skip_interval must not be negative")
        self.skip_pointers = []
        if not self.postings:
            self._skips_dirty = False
            return
        if skip_interval == 0:
            skip_interval = max(1, math.isqrt(len(self.postings)))
        self.skip_pointers = [
            SkipPointer(i, self.postings[i].doc_id)
            for i in range(0, len(self.postings), skip_interval)
        ]
        self._skips_dirty = False

    def find_skip_target(self, target_doc_id: int) -> int:
        """Return the position of the last skip pointer whose document precedes the target."""
        if not self.skip_pointers:
            return 0
        index = bisect_left(self.skip_pointers, target_doc_id, key=lambda sp: sp.doc_id)
        if index == 0:
            return 0
        return self.skip_pointers[index - 1].position

    def mark_skips_dirty(self) -> None:
        """Flag the skip pointers as needing a rebuild."""
        self._skips_dirty = True

    def needs_skip_rebuild(self) -> bool:
        """Whether the postings changed since the skip pointers were built."""
        return self._skips_dirty

    def _copy(self) -> PostingList:
        clone = PostingList(
            [posting._copy() for posting in self.postings], list(self.skip_pointers)
        )
        clone._skips_dirty = self._skips_dirty
        return clone


def intersect_with_skips(list1: PostingList, list2: PostingList) -> list[int]:
    """Return the document ids present in both posting lists, using skip pointers."""
    result: list[int] = []
    i = j = 0
    postings1, postings2 = list1.postings, list2.postings
    while i < len(postings1) and j < len(postings2):
        doc_id1 = postings1[i].doc_id
        doc_id2 = postings2[j].doc_id
        if doc_id1 == doc_id2:
            result.append(doc_id1)
            i += 1
            j += 1
        elif doc_id1 < doc_id2:
            if list1.skip_pointers:
                i = max(i + 1, list1.find_skip_target(doc_id2))
            else:
                i += 1
        else:
            if list2.skip_pointers:
                j = max(j + 1, list2.find_skip_target(doc_id1))
            else:
                j += 1
    return result


class InvertedIndex:
    """Maps terms to posting lists; every operation is guarded by a lock."""

    def __init__(self) -> None:
        self._index: dict[str, PostingList] = {}
        self._lock = threading.Lock()

    def add_term(self, term: str, doc_id: int, position: int = 0) -> None:
        """Record one occurrence of ``term`` in a document.

        A position of 0 counts the occurrence without recording where it is.
        """
        with self._lock:
            posting_list = self._index.setdefault(term, PostingList())
            existing = next(
                (p for p in posting_list.postings if p.doc_id == doc_id), None
            )
            if existing is not None:
                existing.term_frequency += 1
                if position > 0:
                    existing.positions.append(position)
            else:
                posting = Posting(doc_id, 1)
                if position > 0:
                    posting.positions.append(position)
                posting_list.add_posting(posting)
            posting_list.mark_skips_dirty()

    def postings(self, term: str) -> list[Posting]:
        """Return a copy of the postings for a term, empty if it is unknown."""
        with self._lock:
            posting_list = self._index.get(term)
            if posting_list is None:
                return []
            return [posting._copy() for posting in posting_list.postings]

    def posting_list(self, term: str) -> PostingList:
        """Return a copy of a term's posting list with up-to-date skip pointers."""
        with self._lock:
            stored = self._index.get(term)
            if stored is None:
                return PostingList()
            clone = stored._copy()
        if clone.needs_skip_rebuild() and clone.postings:
            clone.build_skip_pointers()
        return clone

    def remove_document(self, doc_id: int) -> None:
        """Drop every posting of a document and any term left without postings."""
        with self._lock:
            for posting_list in self._index.values():
                posting_list.postings = [
                    p for p in posting_list.postings if p.doc_id != doc_id
                ]
                if posting_list.postings:
                    posting_list.mark_skips_dirty()
            self._index = {
                term: posting_list
                for term, posting_list in self._index.items()
                if posting_list.postings
            }

    def document_frequency(self, term: str) -> int:
        """Return the number of documents containing a term."""
        with self._lock:
            posting_list = self._index.get(term)
            return len(posting_list.postings) if posting_list is not None else 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._index)

    def __contains__(self, term: object) -> bool:
        with self._lock:
            return term in self._index

    def clear(self) -> None:
        """Remove every term."""
        with self._lock:
            self._index.clear()

    def rebuild_skip_pointers(self, term: Optional[str] = None) -> None:
        """Rebuild skip pointers for one term, or for every term when none is given."""
        with self._lock:
            if term is None:
                targets: Iterable[PostingList] = self._index.values()
            else:
                found = self._index.get(term)
                targets = [found] if found is not None else []
            for posting_list in targets:
                if posting_list.postings:
                    posting_list.build_skip_pointers()

    def vocabulary(self) -> set[str]:
        """Return the set of indexed terms."""
        with self._lock:
            return set(self._index)

    def items(self) -> list[tuple[str, PostingList]]:
        """Return copies of every term and its posting list."""
        with self._lock:
            return [(term, pl._copy()) for term, pl in self._index.items()]