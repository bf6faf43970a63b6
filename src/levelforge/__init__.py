"""levelforge: content-graph store for level-based learning games."""

__version__ = "0.1.0"
