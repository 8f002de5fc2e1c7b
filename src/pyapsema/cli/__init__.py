"""Command-line tools for pyapsema."""
