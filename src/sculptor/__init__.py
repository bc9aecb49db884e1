"""Sculptor: periodized training program synthesis."""

__version__ = "0.1.0"
