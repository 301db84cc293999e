"""Generic N-dimensional array toolkit."""

__version__ = "0.1.0"
