"""
Hierarchical clustering of the similarity graph into the inferred types.
"""

from .engine import AgglomerativeEngine, ClusteringEngine, similarity_matrix
from .models import ClusteringOptions, ReductionPolicy

__all__ = [
    "AgglomerativeEngine",
    "ClusteringEngine",
    "similarity_matrix",
    "ClusteringOptions",
    "ReductionPolicy",
]
