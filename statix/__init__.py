"""
Statix - statistical type inference over RDF-like instance data.

Property significance weights are inferred from occurrence statistics
(optionally supervised), a weighted similarity graph is built over the
instances and handed to a hierarchical clustering engine.
"""

import importlib.metadata

# import version from project metadata
try:
    __version__ = importlib.metadata.version("statix")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"

# Default file extensions
EXT_HINTS = ".ipl"  # Indicativity of the property per line
EXT_CLUSTERS = ".cnl"  # Inferred types (clusters), nodes per line
EXT_NETWORK = ".rcg"  # Clustering input network

__all__ = ["__version__", "EXT_HINTS", "EXT_CLUSTERS", "EXT_NETWORK"]
