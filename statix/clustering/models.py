"""
Data models of the hierarchical clustering run.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Links reduction policy applied by the engine before the clustering
ReductionPolicy = Literal["none", "accurate", "mean", "severe"]


class ClusteringOptions(BaseModel):
    """Options of the clustering engine."""

    scale: float = Field(default=1.0, gt=0)  # Resolution, larger is finer
    multilevel: bool = False  # Output clusters of all levels vs a single level
    reduction: ReductionPolicy = "none"
    reduce_by_weight: bool = False  # Global weight quantile vs per-node reduction
    filter_members: bool = False  # Omit the filtered out (negative id) members

    model_config = ConfigDict(frozen=True)
