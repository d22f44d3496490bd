"""Summarize exported Mirth Connect channels as a delimited report."""

__version__ = "0.1.0"
