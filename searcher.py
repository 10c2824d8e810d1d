# searcher.py
# Query and result model for the positional index:
#  - Query: sorted unique stems of one query line
#  - Result: (location, count, score) for one query at one location
#  - ranking: score desc, count desc, location asc (ignoring case)
#  - query files -> sorted, deduplicated Query list
#  - batch search over a frozen index, optionally on a thread pool

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from utils import get_stemmer, unique_stems

logger = logging.getLogger(__name__)

# ----------------- query model -----------------

@dataclass(frozen=True)
class Query:
    """one search line: its unique stems, sorted"""
    terms: Tuple[str, ...]

    @classmethod
    def from_terms(cls, terms: Iterable[str]) -> "Query":
        return cls(tuple(sorted(set(terms))))

    def __iter__(self):
        return iter(self.terms)

    def __len__(self):
        return len(self.terms)

    def __str__(self):
        return " ".join(self.terms)


def query_sort_key(query: Query) -> str:
    return str(query).lower()

# ----------------- result model + ranking -----------------

@dataclass(frozen=True)
class Result:
    location: str
    count: int
    score: float

    @classmethod
    def of(cls, location: str, count: int, total: int) -> "Result":
        return cls(location, count, count / total)


def result_sort_key(result: Result):
    """higher score first, then higher count, then location ignoring case"""
    return (-result.score, -result.count, result.location.lower())


def rank(results: Iterable[Result]) -> List[Result]:
    # sorted() is stable, full ties keep encounter order
    return sorted(results, key=result_sort_key)

# ----------------- query set builder -----------------

def parse_queries(lines: Iterable[str], stemmer=None) -> List[Query]:
    """
    Turn raw query lines into the sorted list of distinct queries.
    Lines without any word are skipped; lines whose stems form an already seen
    term set (in any order) are dropped.
    """
    stemmer = stemmer or get_stemmer()
    seen: Dict[str, Query] = {}
    for line in lines:
        stems = unique_stems(line, stemmer)
        if not stems:
            continue
        query = Query(tuple(stems))
        seen.setdefault(str(query), query)
    return sorted(seen.values(), key=query_sort_key)


def unique_query_stems(path, stemmer=None) -> List[Query]:
    with open(path, "r", encoding="utf-8") as f:
        queries = parse_queries(f, stemmer)
    logger.info("read %d unique queries from %s", len(queries), path)
    return queries

# ----------------- batch search -----------------

def search_all(queries: Iterable[Query], index, exact: bool = False, threads: int = 1) -> Dict[Query, List[Result]]:
    """
    Run every query against `index`, returning {query: ranked results} in the
    order the queries were given. An index without any location has nothing
    to search and gives {}.
    The index is frozen first; once frozen it is only read, so queries can be
    spread over `threads` worker threads.
    """
    queries = list(queries)
    if not index.frozen:
        index.freeze()
    if not index.get_counts():
        return {}

    def run(query):
        return index.search(query, exact=exact)

    if threads > 1 and len(queries) > 1:
        logger.debug("searching %d queries on %d threads", len(queries), threads)
        with ThreadPoolExecutor(max_workers=threads) as pool:
            results = list(pool.map(run, queries))
    else:
        results = [run(q) for q in queries]
    return dict(zip(queries, results))
