"""
Test configuration and fixtures for the type inference.

Provides an in-memory similarity source with predefined pairwise weights
that records every similarity evaluation.
"""

from collections import Counter
from collections.abc import Sequence
from pathlib import Path

import pytest


class MatrixSimilaritySource:
    """Similarity source over predefined symmetric pairwise weights."""

    def __init__(
        self,
        pairs: dict[tuple[str, str], float],
        instances: Sequence[str] | None = None,
        ids: dict[str, int] | None = None,
        self_weight: float = 1.0,
        occurrences: dict[str, int] | None = None,
        learned: dict[str, float] | None = None,
    ):
        self.pairs = {frozenset(pair): weight for pair, weight in pairs.items()}
        names = instances or sorted({name for pair in pairs for name in pair})
        self._names = list(names)
        self._ids = ids or {name: int(name) for name in self._names}
        self.self_weight = self_weight
        self.occurrences = occurrences or {}
        self.learned = learned or {}
        self.property_weights: dict[str, float] = {}
        self.calls: Counter = Counter()
        self.gt_calls: list[tuple[str, dict[str, int], bool]] = []

    def instances(self) -> Sequence[str]:
        return self._names

    def instance_id(self, name: str) -> int:
        return self._ids[name]

    def similarity(self, a: str, b: str, jaccard: bool = False) -> float:
        self.calls[frozenset((a, b))] += 1
        if a == b:
            return self.self_weight
        return self.pairs.get(frozenset((a, b)), 0.0)

    def load_input_data(self, path, filter_untyped=False, id_map_path=None):
        return dict(self.occurrences)

    def load_gt_data(self, path, target_properties, dirty=False):
        self.gt_calls.append((str(path), dict(target_properties), dirty))
        return {
            prop: weight
            for prop, weight in self.learned.items()
            if prop in target_properties
        }


def scripted_prompt(responses: list[str]):
    """Prompt function returning the responses in order."""
    answers = iter(responses)
    asked: list[str] = []

    def prompt(text: str) -> str:
        asked.append(text)
        return next(answers)

    prompt.asked = asked
    return prompt


@pytest.fixture
def triangle_source():
    """Three instances: (1,2)=0.2, (1,3)=0, (2,3)=0.6."""
    return MatrixSimilaritySource({("1", "2"): 0.2, ("1", "3"): 0.0, ("2", "3"): 0.6})


@pytest.fixture
def heavy_tailed_occurrences() -> dict[str, int]:
    """One dominating property and fifteen rare ones."""
    occurrences = {"p_common": 10000}
    occurrences.update({f"p_rare{i:02d}": 1 for i in range(15)})
    return occurrences


@pytest.fixture
def dataset_path(tmp_path) -> Path:
    """Path of a (not necessarily existing) dataset file."""
    return tmp_path / "dataset.nt"


@pytest.fixture
def make_source():
    """Factory of the in-memory similarity sources."""
    return MatrixSimilaritySource


@pytest.fixture
def make_prompt():
    """Factory of the scripted operator prompts."""
    return scripted_prompt
