import os
import pytest


class CountingIterator:
    """Iterator over `items` that records how often it was advanced.

    After it has reported exhaustion once, further calls fail the test, so a
    consumer that re-queries an exhausted source is caught.
    """

    def __init__(self, items):
        self._items = iter(items)
        self.pulls = 0
        self.finished = False

    def __iter__(self):
        return self

    def __next__(self):
        assert not self.finished, "source advanced after it reported exhaustion"
        try:
            item = next(self._items)
        except StopIteration:
            self.finished = True
            raise
        self.pulls += 1
        return item


class CountingPredicate:
    """Wraps a predicate and records every item it was called with."""

    def __init__(self, func):
        self.func = func
        self.seen = []

    def __call__(self, item):
        self.seen.append(item)
        return self.func(item)


@pytest.fixture
def monkeypatched_env(monkeypatch):
    """Fixture to replace environment variables with a provided dictionary."""

    def _set_env(env_vars):
        for key in list(os.environ.keys()):
            if key.startswith("SPLITITER_"):
                monkeypatch.delenv(key, raising=False)

        for key, value in env_vars.items():
            monkeypatch.setenv(key, value)

    return _set_env
