"""
Shared pytest fixtures for the roster progress test suite.
All fixtures use an in-memory store and a fixed clock; no files and no real date.
Factory helpers live in tests/factories.py so they can be imported
directly by test modules as well as being used here.
"""
import sys
import os

_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)


import pytest

from factories import (
    RecordingStore,
    make_console,
    make_durations,
    make_manager,
    make_query_roster,
)


# ─── pytest fixtures ──────────────────────────────────────────────────────────

@pytest.fixture
def durations():
    return make_durations()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def console():
    return make_console()


@pytest.fixture
def manager(store, console):
    return make_manager(store=store, console=console)


@pytest.fixture
def query_manager(store, console):
    return make_manager(records=make_query_roster(), store=store, console=console)
