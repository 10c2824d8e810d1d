# utils.py
# text cleaning, snowball stemming and text file discovery
import os
import re
import logging
import unicodedata
from functools import lru_cache
from pathlib import Path

from nltk.stem.snowball import SnowballStemmer

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "english"
TEXT_EXTENSIONS = (".txt", ".text")

_split_re = re.compile(r"\s+")


@lru_cache(maxsize=None)
def get_stemmer(language=DEFAULT_LANGUAGE):
    """shared SnowballStemmer for `language`"""
    return SnowballStemmer(language)


def clean(text):
    """keep only letters and whitespace (accents, digits, numerals and punctuation go), lowercased"""
    text = unicodedata.normalize("NFD", text)
    return "".join(c for c in text if c.isalpha() or c.isspace()).lower()


def normalize(line):
    """split a line into clean lowercase word tokens, in order of appearance"""
    return [t for t in _split_re.split(clean(line)) if t]


def stem(token, stemmer=None):
    stemmer = stemmer or get_stemmer()
    return stemmer.stem(token)


def stem_line(line, stemmer=None):
    """stems of every token of a line, duplicates and order kept"""
    stemmer = stemmer or get_stemmer()
    return [stemmer.stem(t) for t in normalize(line)]


def unique_stems(line, stemmer=None):
    """sorted unique stems of a line"""
    return sorted(set(stem_line(line, stemmer)))


def is_text_file(path):
    path = Path(path)
    return path.is_file() and path.name.lower().endswith(TEXT_EXTENSIONS)


def find_text_files(root):
    """
    returns the text files under root.
    a single file is returned as is (if it is a text file), directories are
    walked recursively following symlinks, visiting entries in sorted order.
    """
    root = Path(root)
    if not root.exists():
        raise FileNotFoundError(f"No such file or directory: {root}")
    if not root.is_dir():
        return [root] if is_text_file(root) else []

    found = []
    seen = set()
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
        # a symlink back to a visited directory would loop forever
        st = os.stat(dirpath)
        if (st.st_dev, st.st_ino) in seen:
            logger.debug("skipping already visited directory %s", dirpath)
            dirnames[:] = []
            continue
        seen.add((st.st_dev, st.st_ino))
        dirnames.sort()
        for fname in sorted(filenames):
            path = Path(dirpath) / fname
            if is_text_file(path):
                found.append(path)
    logger.debug("found %d text files under %s", len(found), root)
    return found


def as_location(path):
    """location string used in output: forward slashes only"""
    return str(path).replace("\\", "/")
