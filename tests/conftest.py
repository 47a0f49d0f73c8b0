"""Pytest fixtures for bytesexp tests."""

import random
from pathlib import Path

import pytest

from bytesexp import Atom, List, Sexp

SAMPLE_DOCUMENT = b"""; project description
(project
  (name "demo board")
  #| the version below
     is #| nested |# informational |#
  (version 3)
  (tags (a b "c d"))
  (path "C:\\\\work\\\\demo")
  (empty ""))
"""

SAMPLE_STREAM = b"""(header v1)
; records follow
(record 1 "first line\\nsecond line")
(record 2 plain)
trailer
"""


def random_sexp(rng: random.Random, max_depth: int = 4) -> Sexp:
    """Build a random tree: short lowercase atoms, arbitrary byte atoms and lists."""
    if max_depth == 0 or rng.random() < 0.5:
        if rng.random() < 0.5:
            size = rng.randint(1, 10)
            return Atom(bytes(rng.randint(97, 122) for _ in range(size)))
        size = rng.randint(0, 12)
        return Atom(bytes(rng.randint(0, 255) for _ in range(size)))
    return List(random_sexp(rng, max_depth - 1) for _ in range(rng.randint(0, 9)))


@pytest.fixture
def rng() -> random.Random:
    """Deterministic random source."""
    return random.Random(54321)


@pytest.fixture
def random_trees(rng) -> list:
    """A few hundred random trees."""
    return [random_sexp(rng) for _ in range(300)]


@pytest.fixture
def sample_document(tmp_path: Path) -> Path:
    """A commented single-datum document on disk."""
    path = tmp_path / "project.sexp"
    path.write_bytes(SAMPLE_DOCUMENT)
    return path


@pytest.fixture
def sample_stream(tmp_path: Path) -> Path:
    """A file with several top-level data."""
    path = tmp_path / "stream.sexp"
    path.write_bytes(SAMPLE_STREAM)
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run from an empty project with no user config."""
    project = tmp_path / "project"
    project.mkdir()
    (project / ".git").mkdir()
    monkeypatch.chdir(project)
    monkeypatch.setattr("bytesexp.config.USER_CONFIG_PATH", tmp_path / "no-user-config.toml")
    return project
