"""Command line interface for Mirth Channel Report."""
