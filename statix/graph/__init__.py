"""
Similarity graph construction for the type inference.

The pairwise similarities of the instances form a weighted graph, optionally
sparsified by the links cutting, which is either materialized in memory for
the clustering or saved as a network file.
"""

from .builder import GraphBuilder, LinkReductionError, reduce_links, reduction_margin
from .models import Graph, Link
from .sinks import GraphSink, LinkSink, NetworkWriter

__all__ = [
    "GraphBuilder",
    "LinkReductionError",
    "reduce_links",
    "reduction_margin",
    "Graph",
    "Link",
    "GraphSink",
    "LinkSink",
    "NetworkWriter",
]
