import pytest

from indexer import InvertedIndex, add_file, build
from searcher import Query, Result


@pytest.fixture
def index():
    index = InvertedIndex()
    index.add_all(["run", "run", "runner", "the"], "b.txt")
    index.add_all(["run", "cat"], "a.txt")
    index.add_all(["runner", "dog", "dog", "dog"], "c.txt")
    return index


def test_add_and_contains():
    index = InvertedIndex()
    assert index.add("cat", "a.txt", 3)
    assert index.contains("cat")
    assert index.contains("cat", "a.txt")
    assert index.contains("cat", "a.txt", 3)
    assert not index.contains("cat", "a.txt", 4)
    assert not index.contains("cat", "b.txt")
    assert not index.contains("dog")
    assert index.get_word_count("a.txt") == 1
    assert index.get_word_count("missing.txt") == 0


def test_duplicate_position_is_ignored():
    index = InvertedIndex()
    index.add("cat", "a.txt", 1)
    assert not index.add("cat", "a.txt", 1)
    assert index.get_positions("cat", "a.txt") == (1,)
    assert index.get_word_count("a.txt") == 1


def test_word_count_counts_distinct_word_positions():
    index = InvertedIndex()
    index.add("cat", "a.txt", 1)
    index.add("dog", "a.txt", 1)
    index.add("cat", "a.txt", 2)
    index.add("cat", "a.txt", 2)
    assert index.get_word_count("a.txt") == 3


def test_bad_position():
    with pytest.raises(ValueError):
        InvertedIndex().add("cat", "a.txt", 0)


def test_lookups_are_sorted_read_only_views(index):
    assert index.get_words() == ("cat", "dog", "run", "runner", "the")
    assert index.get_locations("run") == ("a.txt", "b.txt")
    assert index.get_positions("dog", "c.txt") == (2, 3, 4)
    assert index.get_locations("missing") == ()
    assert index.get_positions("run", "c.txt") == ()

    counts = index.get_counts()
    assert dict(counts) == {"b.txt": 4, "a.txt": 2, "c.txt": 4}
    with pytest.raises(TypeError):
        counts["a.txt"] = 10


def test_size(index):
    assert index.size() == len(index) == 5
    assert index.size("run") == 2
    assert index.size("run", "b.txt") == 2
    assert index.size("missing", "b.txt") == 0


def test_exact_results(index):
    results = index.get_exact_results(Query.from_terms(["run"]))
    # equal scores, b.txt has more matches
    assert results == [Result("b.txt", 2, 0.5), Result("a.txt", 1, 0.5)]


def test_exact_results_only_verbatim_terms(index):
    assert index.get_exact_results(Query.from_terms(["ru"])) == []


def test_partial_results_sum_prefix_matches(index):
    results = index.get_partial_results(Query.from_terms(["run"]))
    assert results == [
        Result("b.txt", 3, 0.75),
        Result("a.txt", 1, 0.5),
        Result("c.txt", 1, 0.25),
    ]


def test_partial_results_count_each_query_term():
    index = InvertedIndex()
    index.add_all(["runner", "cat"], "a.txt")
    # "runner" matches both "run" and "runner"
    results = index.get_partial_results(Query.from_terms(["run", "runner"]))
    assert results == [Result("a.txt", 2, 1.0)]


def test_ranking_ties():
    index = InvertedIndex()
    index.add_all(["cat", "dog"], "B.txt")
    index.add_all(["cat", "dog"], "a.txt")
    index.add_all(["cat", "cat", "dog", "dog"], "c.txt")
    index.add_all(["cat", "dog", "dog", "dog"], "d.txt")
    results = index.get_exact_results(Query.from_terms(["cat"]))
    # same score 0.5: higher count first, then location ignoring case
    assert [r.location for r in results] == ["c.txt", "a.txt", "B.txt", "d.txt"]


def test_higher_score_beats_same_count():
    index = InvertedIndex()
    index.add_all(["cat", "dog", "dog", "dog"], "long.txt")
    index.add_all(["cat", "dog"], "short.txt")
    results = index.get_exact_results(Query.from_terms(["cat"]))
    assert [r.location for r in results] == ["short.txt", "long.txt"]


def test_search_dispatch(index):
    query = Query.from_terms(["run"])
    assert index.search(query, exact=True) == index.get_exact_results(query)
    assert index.search(query) == index.get_partial_results(query)


def test_results_use_forward_slashes():
    index = InvertedIndex()
    index.add("cat", "dir\\a.txt", 1)
    assert index.get_exact_results(Query.from_terms(["cat"]))[0].location == "dir/a.txt"


def test_freeze(index):
    before = index.get_partial_results(Query.from_terms(["run"]))
    index.freeze()
    assert index.frozen
    with pytest.raises(RuntimeError):
        index.add("new", "a.txt", 10)
    assert index.get_partial_results(Query.from_terms(["run"])) == before


def test_empty_index_has_no_results():
    index = InvertedIndex()
    assert index.get_exact_results(Query.from_terms(["cat"])) == []
    assert index.get_partial_results(Query.from_terms(["cat"])) == []


def test_str(index):
    text = str(index)
    assert text.startswith("Inverted Index:\n{")
    assert "File Word Counts:" in text


def test_add_file_positions_count_raw_tokens(tmp_path):
    path = tmp_path / "run.txt"
    path.write_text("Running, runs!\n\nrunner 99 runs\n", encoding="utf-8")
    index = InvertedIndex()
    assert add_file(path, index) == 4
    location = str(path)
    assert index.get_positions("run", location) == (1, 2, 4)
    assert index.get_positions("runner", location) == (3,)
    assert index.get_word_count(location) == 4

    query = Query.from_terms(["run"])
    assert index.get_exact_results(query)[0].count == 3
    assert index.get_partial_results(query)[0].count == 4


def test_build_directory(corpus):
    index = build(corpus)
    a, b, c = str(corpus / "a.txt"), str(corpus / "sub" / "b.TEXT"), str(corpus / "c.txt")
    assert dict(index.get_counts()) == {a: 5, b: 5, c: 3}
    assert index.get_positions("cat", a) == (2, 5)
    assert index.get_positions("run", a) == (3, 4)
    assert index.get_positions("dog", c) == (2, 3)
    assert not index.frozen


def test_build_single_file(corpus):
    index = build(corpus / "c.txt")
    assert index.get_words() == ("dog", "runner")


def test_build_unreadable_file(corpus):
    (corpus / "bad.txt").write_bytes(b"cat \xff\xfe dog")
    with pytest.raises(UnicodeDecodeError):
        build(corpus)

    index = build(corpus, skip_errors=True)
    assert str(corpus / "bad.txt") not in index.get_counts()
    assert str(corpus / "c.txt") in index.get_counts()


def test_build_missing_root(tmp_path):
    with pytest.raises(OSError):
        build(tmp_path / "missing")
