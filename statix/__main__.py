"""
Statix Module Entry Point

Usage:
    python -m statix [OPTIONS] COMMAND [ARGS]...

Examples:
    # Infer types of the dataset instances
    python -m statix cluster data.nt

    # Ask for brief hints on the heavy head of the properties
    python -m statix cluster data.nt --hints=--

    # Save the clustering input network without clustering
    python -m statix network data.nt --links-cut 0.5
"""

from statix.cli import main

if __name__ == "__main__":
    main()
