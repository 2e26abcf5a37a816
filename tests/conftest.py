from __future__ import annotations

import os
import random

import numpy as np
import pytest

# headless runs: pick the backend before pyplot is first imported
os.environ.setdefault("MPLBACKEND", "Agg")

TILES = [0, 0, 0, 2, 2, 4, 4, 8, 16, 32, 64, 128]


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class StubRandom:
    """Picks `seq[pick]` and always rolls `roll`; remembers what it was offered."""

    def __init__(self, pick: int = 0, roll: float = 0.5) -> None:
        self.pick = pick
        self.roll = roll
        self.offered: list = []

    def choice(self, seq):
        self.offered = list(seq)
        return seq[self.pick]

    def random(self) -> float:
        return self.roll


@pytest.fixture()
def sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture()
def stub_random() -> type[StubRandom]:
    return StubRandom


@pytest.fixture()
def random_grids() -> list[np.ndarray]:
    rng = random.Random(2048)
    return [
        np.array([[rng.choice(TILES) for _ in range(4)] for _ in range(4)], dtype=np.int64)
        for _ in range(200)
    ]
