import random

import pytest


class ScriptedRandom:
    """Stands in for random.Random, returning a fixed sequence of draws."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randint(self, a, b):
        self.calls.append((a, b))
        return self.values.pop(0)


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def rng():
    return random.Random(12345)


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    # Keep a developer's settings.json and DICE_* variables out of the tests
    monkeypatch.chdir(tmp_path)
    for key in ('DICE_SETTINGS', 'DICE_QUIET', 'DICE_SEED', 'DICE_MAX_DICE', 'DICE_LOG_LEVEL'):
        monkeypatch.delenv(key, raising=False)
