"""Database segmentation, minimiser thresholds and prefiltering for local alignment search."""

__version__ = "1.0.0"