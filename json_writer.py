# json_writer.py
# tab indented "pretty" JSON for the index, the word counts and search results.
#
# layout rules:
#  - one element per line, nested levels indented with one tab
#  - keys sorted, no trailing commas, no newline after the closing bracket
#  - empty containers are written as [] and {}

import json
import logging

from utils import as_location

logger = logging.getLogger(__name__)

SCORE_FORMAT = "{:.8f}"


def _indent(level):
    return "\t" * level


def _quote(text):
    return json.dumps(str(text), ensure_ascii=False)


def _block(opening, closing, items, level):
    """wrap already rendered items (first line not indented) in brackets"""
    if not items:
        return opening + closing
    inner = ",\n".join(_indent(level + 1) + item for item in items)
    return f"{opening}\n{inner}\n{_indent(level)}{closing}"


def format_score(score):
    return SCORE_FORMAT.format(score)


def as_array(values, level=0):
    return _block("[", "]", [str(v) for v in values], level)


def _by_location(elements):
    """(location as written, value) pairs sorted by the written location"""
    return sorted(((as_location(k), v) for k, v in elements.items()), key=lambda item: item[0])


def as_object(elements, level=0):
    """{ "location": int, ... } sorted by location"""
    items = [f"{_quote(k)}: {v}" for k, v in _by_location(elements)]
    return _block("{", "}", items, level)


def as_nested_object(elements, level=0):
    """{ "location": [ int, ... ], ... } sorted by location, arrays sorted ascending"""
    items = [
        f"{_quote(k)}: {as_array(sorted(v), level + 1)}"
        for k, v in _by_location(elements)
    ]
    return _block("{", "}", items, level)


def as_inverted_index(elements, level=0):
    """{ "word": { "location": [ positions ] } }"""
    items = [
        f"{_quote(word)}: {as_nested_object(locations, level + 1)}"
        for word, locations in sorted(elements.items())
    ]
    return _block("{", "}", items, level)


def as_result(result, level=0):
    items = [
        f'"where": {_quote(as_location(result.location))}',
        f'"count": {result.count}',
        f'"score": {_quote(format_score(result.score))}',
    ]
    return _block("{", "}", items, level)


def as_search_results(elements, level=0):
    """
    { "query": [ { "where": ..., "count": ..., "score": ... }, ... ], ... }

    `elements` maps queries (anything whose str() is the canonical query text)
    to already ranked result lists. Queries are written sorted by their text,
    ignoring case (the order of searcher.query_sort_key). Results keep the
    order they were given in.
    """
    rendered = {str(query): results for query, results in elements.items()}
    items = []
    for text in sorted(rendered, key=str.lower):
        results = [as_result(r, level + 2) for r in rendered[text]]
        items.append(f"{_quote(text)}: {_block('[', ']', results, level + 1)}")
    return _block("{", "}", items, level)


def write_json(text, path):
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info("Saved: %s", path)


def write_index(elements, path):
    write_json(as_inverted_index(elements), path)


def write_counts(elements, path):
    write_json(as_object(elements), path)


def write_results(elements, path):
    write_json(as_search_results(elements), path)
