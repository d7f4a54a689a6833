"""
Contract of the similarity source consumed by the type inference.

The source loads the instance data, counts the property occurrences and
evaluates the symmetric pairwise similarity of the instances using the
property weights.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class SimilaritySource(Protocol):
    """Similarity oracle over the loaded instances."""

    property_weights: dict[str, float]

    def instances(self) -> Sequence[str]:
        """Instances in a fixed, repeatable order."""
        ...

    def instance_id(self, name: str) -> int:
        """Id of the instance, negative if the instance is filtered out."""
        ...

    def similarity(self, a: str, b: str, jaccard: bool = False) -> float:
        """Symmetric similarity of the instances, >= 0."""
        ...

    def load_input_data(
        self,
        path: str | Path,
        filter_untyped: bool = False,
        id_map_path: str | Path | None = None,
    ) -> dict[str, int]:
        """Load the dataset and return the property occurrences."""
        ...

    def load_gt_data(
        self, path: str | Path, target_properties: dict[str, int], dirty: bool = False
    ) -> dict[str, float]:
        """Learn the weights of the target properties from the labeled dataset."""
        ...
