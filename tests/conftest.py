import pytest


@pytest.fixture
def corpus(tmp_path):
    """
    small corpus:
      a.txt        the cat run run cat        (5 words)
      c.txt        runner dog dog             (3 words)
      sub/b.TEXT   a dog and a cat            (5 words)
      notes.md     not a text file, ignored
    """
    root = tmp_path / "corpus"
    (root / "sub").mkdir(parents=True)
    (root / "a.txt").write_text("The cat runs.\nRunning cats!\n", encoding="utf-8")
    (root / "c.txt").write_text("runner 42 dog\n\n  dog\n", encoding="utf-8")
    (root / "sub" / "b.TEXT").write_text("A dog and a cat", encoding="utf-8")
    (root / "notes.md").write_text("cat cat cat", encoding="utf-8")
    return root


@pytest.fixture
def query_file(tmp_path):
    path = tmp_path / "queries.txt"
    path.write_text("cats\nrun\n\nDOG cat\ncat dogs\n!!!\n", encoding="utf-8")
    return path
