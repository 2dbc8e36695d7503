from typing import List

import pytest

from coffee_guide.presets import Preset, PresetStore


class RecordingSlot:
    """In-memory slot that remembers every write."""

    def __init__(self, presets: List[Preset] = None):
        self.stored: List[Preset] = list(presets or [])
        self.writes: List[List[Preset]] = []

    def load(self) -> List[Preset]:
        return list(self.stored)

    def write(self, presets) -> bool:
        self.stored = list(presets)
        self.writes.append(list(presets))
        return True


@pytest.fixture
def slot():
    return RecordingSlot()


@pytest.fixture
def store(slot):
    return PresetStore.open(slot)
