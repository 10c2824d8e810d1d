# indexer.py
# Positional inverted index: stem -> location -> positions, plus the number of
# words recorded per location. Built from a file or a directory of .txt/.text
# files and searched with exact or prefix matching.

import logging
from bisect import bisect_left
from collections import defaultdict
from types import MappingProxyType

import json_writer
from searcher import Result, rank
from utils import as_location, find_text_files, get_stemmer, normalize

logger = logging.getLogger(__name__)

_EMPTY = MappingProxyType({})


class InvertedIndex:
    """
    word -> location -> set of 1-based positions, and location -> word count.

    The index has two phases: while building it has a single writer calling
    add(); freeze() ends that phase and from then on the index is read-only
    and may be searched from several threads.
    """

    def __init__(self):
        self._index = {}
        self._counts = {}
        self._frozen = False
        self._words = None

    # ----------------- building -----------------

    def add(self, word, location, position):
        """
        Record `word` at `position` of `location`.
        Returns False (and leaves the word count alone) if that position was
        already recorded for the word.
        """
        if self._frozen:
            raise RuntimeError("index is frozen, it can no longer be modified")
        if position < 1:
            raise ValueError(f"positions start at 1, got {position}")

        positions = self._index.setdefault(word, {}).setdefault(location, set())
        if position in positions:
            return False
        positions.add(position)
        self._counts[location] = self._counts.get(location, 0) + 1
        return True

    def add_all(self, words, location, start=1):
        """add words in order from position `start`, returns how many were new"""
        added = 0
        for position, word in enumerate(words, start=start):
            if self.add(word, location, position):
                added += 1
        return added

    def freeze(self):
        """end the build phase, the index is read-only afterwards"""
        self._words = sorted(self._index)
        self._frozen = True
        logger.debug("index frozen: %d words, %d locations", len(self._words), len(self._counts))
        return self

    @property
    def frozen(self):
        return self._frozen

    # ----------------- lookups -----------------

    def contains(self, word, location=None, position=None):
        locations = self._index.get(word)
        if locations is None:
            return False
        if location is None:
            return True
        positions = locations.get(location)
        if positions is None:
            return False
        if position is None:
            return True
        return position in positions

    def get_words(self):
        return tuple(self._sorted_words())

    def get_locations(self, word):
        return tuple(sorted(self._index.get(word, _EMPTY)))

    def get_positions(self, word, location):
        return tuple(sorted(self._index.get(word, _EMPTY).get(location, ())))

    def get_counts(self):
        return MappingProxyType(self._counts)

    def get_word_count(self, location):
        return self._counts.get(location, 0)

    def size(self, word=None, location=None):
        """number of words, of locations for a word, or of positions for a word at a location"""
        if word is None:
            return len(self._index)
        if location is None:
            return len(self._index.get(word, _EMPTY))
        return len(self._index.get(word, _EMPTY).get(location, ()))

    def __len__(self):
        return len(self._index)

    def _sorted_words(self):
        return self._words if self._frozen else sorted(self._index)

    def _prefixed(self, prefix):
        """indexed words starting with prefix"""
        words = self._sorted_words()
        i = bisect_left(words, prefix)
        while i < len(words) and words[i].startswith(prefix):
            yield words[i]
            i += 1

    # ----------------- searching -----------------

    def _results(self, matches):
        """matches: location -> count; returns ranked results, zero counts dropped"""
        results = [
            Result.of(as_location(location), count, self._counts[location])
            for location, count in sorted(matches.items())
            if count > 0
        ]
        return rank(results)

    def get_exact_results(self, query):
        """locations holding any query stem verbatim, counting its positions"""
        matches = defaultdict(int)
        for term in query:
            for location, positions in self._index.get(term, _EMPTY).items():
                matches[location] += len(positions)
        return self._results(matches)

    def get_partial_results(self, query):
        """
        locations holding any stem that starts with a query stem.
        Each query stem is counted on its own: an indexed word matching two
        query stems adds its positions twice.
        """
        matches = defaultdict(int)
        for term in query:
            for word in self._prefixed(term):
                for location, positions in self._index[word].items():
                    matches[location] += len(positions)
        return self._results(matches)

    def search(self, query, exact=False):
        return self.get_exact_results(query) if exact else self.get_partial_results(query)

    # ----------------- output -----------------

    def write_index(self, path):
        json_writer.write_index(self._index, path)

    def write_counts(self, path):
        json_writer.write_counts(self._counts, path)

    def __str__(self):
        return (
            "Inverted Index:\n" + json_writer.as_inverted_index(self._index)
            + "\n\nFile Word Counts:\n" + json_writer.as_object(self._counts)
        )

# ----------------- index builder -----------------

def add_file(path, index, stemmer=None):
    """
    Index one text file: every token of every line is stemmed and stored at
    its 1-based position in the file. Returns the number of tokens read.
    """
    stemmer = stemmer or get_stemmer()
    location = str(path)
    position = 0
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            for word in normalize(line):
                position += 1
                index.add(stemmer.stem(word), location, position)
    logger.debug("Indexed: %s (%d tokens)", location, position)
    return position


def build(root, index=None, skip_errors=False):
    """
    Index every text file under root (a file or a directory).
    Read errors stop the build unless skip_errors is set, then the file is
    logged and skipped.
    """
    index = InvertedIndex() if index is None else index
    stemmer = get_stemmer()
    files = find_text_files(root)
    logger.info("Indexing %d files under: %s", len(files), root)
    for path in files:
        try:
            add_file(path, index, stemmer)
        except (OSError, UnicodeDecodeError) as e:
            if not skip_errors:
                raise
            logger.warning("Skipping %s: %s", path, e)
    logger.info("Vocabulary size: %d", len(index))
    return index
