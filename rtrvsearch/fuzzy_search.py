"""Approximate term matching over a vocabulary using an n-gram index."""

from __future__ import annotations

import threading
from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import dataclass

NGRAM_SIZE = 2
DEFAULT_MAX_CANDIDATES = 50


@dataclass(frozen=True)
class FuzzyMatch:
    """A vocabulary term found for a query term, with its edit distance."""

    original_term: str
    matched_term: str
    edit_distance: int


def extract_ngrams(term: str) -> list[str]:
    """Return the character n-grams of a term padded with ``^`` and ``$``."""
    if not term:
        return []
    padded = f"^{term}$"
    return [padded[i:i + NGRAM_SIZE] for i in range(len(padded) - NGRAM_SIZE + 1)]


def damerau_levenshtein_distance(s1: str, s2: str, max_distance: int) -> int:
    """Optimal string alignment distance between two strings.

    Returns ``max_distance + 1`` as soon as the distance is known to exceed
    ``max_distance``.
    """
    len1, len2 = len(s1), len(s2)
    if len1 > len2 + max_distance or len2 > len1 + max_distance:
        return max_distance + 1
    if len1 == 0:
        return len2
    if len2 == 0:
        return len1
    if s1 == s2:
        return 0

    before_previous: list[int] = []
    previous = list(range(len2 + 1))
    for i in range(1, len1 + 1):
        current = [i] + [0] * len2
        char1 = s1[i - 1]
        for j in range(1, len2 + 1):
            cost = 0 if char1 == s2[j - 1] else 1
            value = min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost)
            if i > 1 and j > 1 and char1 == s2[j - 2] and s1[i - 2] == s2[j - 1]:
                value = min(value, before_previous[j - 2] + cost)
            current[j] = value
        if min(current[1:]) > max_distance:
            return max_distance + 1
        before_previous, previous = previous, current
    return previous[len2]


def auto_max_edit_distance(term_length: int) -> int:
    """Edit distance allowed for a term of the given length."""
    if term_length <= 2:
        return 0
    if term_length <= 4:
        return 1
    return 2


class FuzzySearch:
    """Finds vocabulary terms within a small edit distance of a query term."""

    def __init__(self) -> None:
        self._ngram_index: defaultdict[str, set[str]] = defaultdict(set)
        self._vocabulary: set[str] = set()
        self._index_built = False
        self._lock = threading.RLock()

    @property
    def is_built(self) -> bool:
        """Whether any vocabulary has been indexed since the last clear."""
        return self._index_built

    def __len__(self) -> int:
        return len(self._vocabulary)

    def __contains__(self, term: object) -> bool:
        return term in self._vocabulary

    def build_ngram_index(self, vocabulary: Iterable[str]) -> None:
        """Replace the indexed vocabulary."""
        with self._lock:
            self.clear()
            self._vocabulary = set(vocabulary)
            for term in self._vocabulary:
                for ngram in extract_ngrams(term):
                    self._ngram_index[ngram].add(term)
            self._index_built = True

    def add_term(self, term: str) -> None:
        """Add one term to the vocabulary."""
        with self._lock:
            if term in self._vocabulary:
                return
            self._vocabulary.add(term)
            for ngram in extract_ngrams(term):
                self._ngram_index[ngram].add(term)
            self._index_built = True

    def remove_term(self, term: str) -> None:
        """Remove one term from the vocabulary, if present."""
        with self._lock:
            if term not in self._vocabulary:
                return
            for ngram in extract_ngrams(term):
                terms = self._ngram_index.get(ngram)
                if terms is not None:
                    terms.discard(term)
                    if not terms:
                        del self._ngram_index[ngram]
            self._vocabulary.discard(term)

    def clear(self) -> None:
        """Forget every term."""
        with self._lock:
            self._ngram_index.clear()
            self._vocabulary.clear()
            self._index_built = False

    def find_matches(
        self,
        term: str,
        max_edit_distance: int = 0,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
    ) -> list[FuzzyMatch]:
        """Return vocabulary terms close to ``term``, nearest first then alphabetical.

        A ``max_edit_distance`` of 0 picks a limit from the term's length.
        """
        if not term:
            return []
        if max_edit_distance == 0:
            max_edit_distance = auto_max_edit_distance(len(term))

        with self._lock:
            if max_edit_distance == 0:
                return [FuzzyMatch(term, term, 0)] if term in self._vocabulary else []

            query_ngrams = extract_ngrams(term)
            candidate_scores: Counter[str] = Counter()
            for ngram in query_ngrams:
                candidate_scores.update(self._ngram_index.get(ngram, ()))

        max_destroyed = max_edit_distance * (NGRAM_SIZE + 1)
        min_shared = 1
        if len(query_ngrams) > max_destroyed + 1:
            min_shared = len(query_ngrams) - max_destroyed

        matches = []
        for candidate, shared in candidate_scores.items():
            if shared < min_shared:
                continue
            distance = damerau_levenshtein_distance(term, candidate, max_edit_distance)
            if distance <= max_edit_distance:
                matches.append(FuzzyMatch(term, candidate, distance))

        matches.sort(key=lambda m: (m.edit_distance, m.matched_term))
        return matches[:max_candidates]