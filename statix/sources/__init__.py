"""
Similarity sources of the instances.

The type inference consumes any SimilaritySource; TripleSimilaritySource is
the reference implementation over line-oriented triples files.
"""

from .base import SimilaritySource
from .triples import RDF_TYPE, TripleSimilaritySource, read_triples

__all__ = ["SimilaritySource", "TripleSimilaritySource", "RDF_TYPE", "read_triples"]
