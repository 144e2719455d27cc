import threading

import pytest

from rtrvsearch.inverted_index import (
    InvertedIndex,
    Posting,
    PostingList,
    SkipPointer,
    intersect_with_skips,
)


@pytest.fixture
def index():
    return InvertedIndex()


def _find(postings, doc_id):
    return next((p for p in postings if p.doc_id == doc_id), None)


def test_add_and_retrieve_postings(index):
    index.add_term("hello", 1)
    index.add_term("world", 1)
    index.add_term("hello", 2)
    index.add_term("hello", 2)

    postings = index.postings("hello")
    assert len(postings) == 2
    assert _find(postings, 1).term_frequency == 1
    assert _find(postings, 2).term_frequency == 2

    world = index.postings("world")
    assert len(world) == 1
    assert world[0].doc_id == 1

    assert index.postings("nonexistent") == []


def test_document_removal(index):
    index.add_term("apple", 1)
    index.add_term("banana", 1)
    index.add_term("apple", 2)
    index.add_term("cherry", 2)
    index.add_term("apple", 3)

    assert len(index.postings("apple")) == 3
    index.remove_document(2)

    apple = index.postings("apple")
    assert len(apple) == 2
    assert _find(apple, 2) is None
    assert index.postings("cherry") == []
    assert "cherry" not in index
    assert len(index.postings("banana")) == 1


def test_document_frequency(index):
    index.add_term("common", 1)
    index.add_term("common", 2)
    index.add_term("common", 3)
    index.add_term("rare", 1)

    assert index.document_frequency("common") == 3
    assert index.document_frequency("rare") == 1
    assert index.document_frequency("nonexistent") == 0

    index.add_term("common", 1)
    index.add_term("common", 1)
    assert index.document_frequency("common") == 3


def test_thread_safety(index):
    num_threads = 10
    terms_per_thread = 100

    def writer(doc_id):
        for j in range(terms_per_thread):
            index.add_term(f"term{j}", doc_id)

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(num_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    for j in range(terms_per_thread):
        assert len(index.postings(f"term{j}")) == num_threads
        assert index.document_frequency(f"term{j}") == num_threads

    read_counts = []

    def reader():
        if index.postings("term0"):
            read_counts.append(1)

    threads = [threading.Thread(target=reader) for _ in range(num_threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(read_counts) == num_threads


def test_clear(index):
    index.add_term("term1", 1)
    index.add_term("term2", 2)
    index.add_term("term3", 3)
    assert len(index) == 3
    assert index.postings("term1")

    index.clear()
    assert len(index) == 0
    assert index.postings("term1") == []
    assert index.postings("term2") == []
    assert index.document_frequency("term1") == 0


def test_skip_pointer_building(index):
    for doc_id in range(1, 101):
        index.add_term("popular", doc_id)
    lst = index.posting_list("popular")

    assert len(lst.postings) == 100
    assert 0 < len(lst.skip_pointers) <= 15
    for prev, cur in zip(lst.skip_pointers, lst.skip_pointers[1:]):
        assert cur.position > prev.position
        assert cur.doc_id > prev.doc_id
    assert lst.skip_pointers[0] == SkipPointer(0, 1)


def test_skip_pointer_custom_interval(index):
    for doc_id in range(1, 101):
        index.add_term("test", doc_id)
    lst = index.posting_list("test")

    lst.build_skip_pointers(10)
    assert len(lst.skip_pointers) == 10
    lst.build_skip_pointers(25)
    assert len(lst.skip_pointers) == 4
    lst.build_skip_pointers(1)
    assert len(lst.skip_pointers) == 100


def test_negative_skip_interval_rejected():
    lst = PostingList()
    lst.add_posting(Posting(1))
    with pytest.raises(ValueError):
        lst.build_skip_pointers(-1)


def test_skip_pointer_find_target(index):
    for doc_id in range(10, 1001, 10):
        index.add_term("sequence", doc_id)
    lst = index.posting_list("sequence")
    assert len(lst.postings) == 100

    assert lst.postings[lst.find_skip_target(250)].doc_id <= 250
    assert lst.postings[lst.find_skip_target(500)].doc_id <= 500
    assert lst.find_skip_target(1) == 0
    assert lst.find_skip_target(2000) < len(lst.postings)


def test_find_skip_target_without_pointers():
    assert PostingList().find_skip_target(42) == 0


def test_intersect_with_skips(index):
    for doc_id in range(1, 101):
        index.add_term("term1", doc_id)
    for doc_id in range(50, 151, 10):
        index.add_term("term2", doc_id)

    result = intersect_with_skips(index.posting_list("term1"), index.posting_list("term2"))
    assert result == [50, 60, 70, 80, 90, 100]


def test_intersect_with_skips_no_overlap(index):
    for doc_id in range(1, 51):
        index.add_term("early", doc_id)
    for doc_id in range(100, 151):
        index.add_term("late", doc_id)

    assert intersect_with_skips(index.posting_list("early"), index.posting_list("late")) == []


def test_intersect_with_skips_complete_overlap(index):
    for doc_id in range(1, 51):
        index.add_term("alpha", doc_id)
        index.add_term("beta", doc_id)

    result = intersect_with_skips(index.posting_list("alpha"), index.posting_list("beta"))
    assert result == list(range(1, 51))


def test_skip_pointer_lazy_building(index):
    for doc_id in range(1, 101):
        index.add_term("lazy", doc_id)
    list1 = index.posting_list("lazy")
    assert len(list1.skip_pointers) > 0
    assert list1.needs_skip_rebuild() is False

    index.add_term("lazy", 101)
    list2 = index.posting_list("lazy")
    assert len(list2.skip_pointers) > 0
    assert len(list2.postings) == 101


def test_skip_pointer_rebuild_all(index):
    for doc_id in range(1, 101):
        index.add_term("term_a", doc_id)
        index.add_term("term_b", doc_id)
        index.add_term("term_c", doc_id)

    index.rebuild_skip_pointers()
    stored = dict(index.items())
    for term in ("term_a", "term_b", "term_c"):
        assert stored[term].needs_skip_rebuild() is False
        assert len(stored[term].skip_pointers) == 10
        assert len(index.posting_list(term).skip_pointers) > 0


def test_rebuild_skip_pointers_single_term(index):
    for doc_id in range(1, 17):
        index.add_term("one", doc_id)
        index.add_term("two", doc_id)
    index.rebuild_skip_pointers("one")
    stored = dict(index.items())
    assert stored["one"].needs_skip_rebuild() is False
    assert len(stored["one"].skip_pointers) == 4
    assert stored["two"].needs_skip_rebuild() is True


def test_skip_pointer_with_positions(index):
    index.add_term("positioned", 1, 10)
    index.add_term("positioned", 1, 20)
    index.add_term("positioned", 2, 5)
    index.add_term("positioned", 3, 15)

    lst = index.posting_list("positioned")
    assert len(lst.postings) == 3
    first = _find(lst.postings, 1)
    assert first.positions == [10, 20]
    assert len(lst.skip_pointers) > 0


def test_skip_pointer_empty_list(index):
    empty = index.posting_list("nonexistent")
    assert empty.postings == []
    assert empty.skip_pointers == []
    empty.build_skip_pointers()
    assert empty.skip_pointers == []


def test_skip_pointer_after_document_removal(index):
    for doc_id in range(1, 101):
        index.add_term("removable", doc_id)
    list1 = index.posting_list("removable")
    assert len(list1.postings) == 100
    assert len(list1.skip_pointers) > 0

    for doc_id in range(50, 61):
        index.remove_document(doc_id)

    list2 = index.posting_list("removable")
    assert len(list2.postings) == 89
    assert len(list2.skip_pointers) > 0

    for doc_id in range(1, 101, 5):
        index.add_term("sparse", doc_id)
    result = intersect_with_skips(list2, index.posting_list("sparse"))
    assert len(result) > 0
    assert all(not 50 <= doc_id <= 60 for doc_id in result)


def test_returned_postings_are_copies(index):
    index.add_term("word", 1, 3)
    copy = index.postings("word")
    copy[0].positions.append(99)
    copy[0].term_frequency = 50
    fresh = index.postings("word")
    assert fresh[0].positions == [3]
    assert fresh[0].term_frequency == 1


def test_vocabulary_and_contains(index):
    index.add_term("alpha", 1)
    index.add_term("beta", 2)
    assert index.vocabulary() == {"alpha", "beta"}
    assert "alpha" in index
    assert "gamma" not in index