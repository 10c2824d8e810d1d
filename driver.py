# driver.py
# command line entry point: build the index, write it out, run queries.
#
#   python driver.py -path input/ -index -counts -query queries.txt -results
#
# every flag is optional; each requested step runs on its own, a failing step
# is reported and the remaining steps still run.

import argparse
import logging
import sys
import time

from indexer import InvertedIndex, build
from json_writer import write_results
from searcher import search_all, unique_query_stems

DEFAULT_INDEX = "index.json"
DEFAULT_COUNTS = "counts.json"
DEFAULT_RESULTS = "results.json"
DEFAULT_THREADS = 5


def make_parser():
    parser = argparse.ArgumentParser(
        description="positional inverted index builder and searcher",
        allow_abbrev=False,
    )
    parser.add_argument("-path", nargs="?", help="text file or directory to index")
    parser.add_argument("-index", nargs="?", const=DEFAULT_INDEX, help=f"write the index as JSON (default {DEFAULT_INDEX})")
    parser.add_argument("-counts", nargs="?", const=DEFAULT_COUNTS, help=f"write word counts as JSON (default {DEFAULT_COUNTS})")
    parser.add_argument("-query", nargs="?", help="file with one query per line")
    parser.add_argument("-exact", action="store_true", help="exact instead of prefix matching")
    parser.add_argument("-results", nargs="?", const=DEFAULT_RESULTS, help=f"write search results as JSON (default {DEFAULT_RESULTS})")
    parser.add_argument("-threads", nargs="?", const=str(DEFAULT_THREADS), help=f"worker threads for searching (default {DEFAULT_THREADS})")
    parser.add_argument("-verbose", action="store_true", help="debug logging on stderr")
    return parser


def parse_threads(value):
    """thread count from the -threads value; missing or bad values give the default"""
    if value is None:
        return 1
    try:
        threads = int(value)
    except ValueError:
        return DEFAULT_THREADS
    return threads if threads > 0 else DEFAULT_THREADS


def main(argv=None):
    start = time.perf_counter()
    args, unknown = make_parser().parse_known_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    log = logging.getLogger("driver")
    if unknown:
        log.debug("ignoring arguments: %s", unknown)

    index = InvertedIndex()
    queries = []

    if args.path:
        try:
            build(args.path, index)
        except (OSError, UnicodeDecodeError) as e:
            log.debug("build failed: %s", e)
            print(f"Unable to generate index from path: {args.path}")

    if args.index:
        try:
            index.write_index(args.index)
        except OSError as e:
            log.debug("index write failed: %s", e)
            print(f"Unable to write index to file at: {args.index}")

    if args.counts:
        try:
            index.write_counts(args.counts)
        except OSError as e:
            log.debug("counts write failed: %s", e)
            print(f"Unable to write counts to file at: {args.counts}")

    if args.query:
        try:
            queries = unique_query_stems(args.query)
        except (OSError, UnicodeDecodeError) as e:
            log.debug("query read failed: %s", e)
            print(f"Query file ({args.query}) could not be read.")

    if args.results:
        results = search_all(queries, index, exact=args.exact, threads=parse_threads(args.threads))
        try:
            write_results(results, args.results)
        except OSError as e:
            log.debug("results write failed: %s", e)
            print(f"Unable to write search results to file at: {args.results}")

    elapsed = time.perf_counter() - start
    print(f"Elapsed: {elapsed:f} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())
