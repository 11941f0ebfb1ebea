"""Incremental tabular data viewer/editor engine."""

__version__ = "0.1.0"
