"""Hop-distance and rule-based styling for graph visualizations."""

__version__ = "0.1.0"
