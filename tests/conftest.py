"""Shared test configuration and fixtures."""

import json
from pathlib import Path

import pytest


FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def _module(id, name, size, *reasons):
    return {
        "id": id,
        "name": name,
        "size": size,
        "reasons": [{"moduleId": reason} for reason in reasons],
    }


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def single_bundle_stats():
    """Entry code, react with a nested fbjs, lodash, and object-assign shared by both."""
    return json.loads((FIXTURES_DIR / "single_bundle.json").read_text())


@pytest.fixture
def multi_bundle_stats():
    return json.loads((FIXTURES_DIR / "multi_bundle.json").read_text())


@pytest.fixture
def circular_stats():
    return json.loads((FIXTURES_DIR / "circular.json").read_text())


@pytest.fixture
def parent_graph():
    """Parent lists of a small DAG with diamonds (node -> parents)."""
    return {
        1: [],
        2: [1],
        3: [2],
        4: [2],
        5: [4],
        6: [3, 5],
        7: [6],
        8: [5],
        9: [8],
    }


@pytest.fixture
def make_module():
    """Factory for report module dicts whose reasons point at the given ids."""
    return _module


@pytest.fixture
def nested_packages_stats():
    """A report whose packages each require the next, 1500 levels deep."""
    depth = 1500
    modules = [_module(0, "./src/index.js", 1)]
    modules += [_module(i, f"./~/p{i}/index.js", 1, i - 1) for i in range(1, depth + 1)]
    return {"name": "deep", "modules": modules}
