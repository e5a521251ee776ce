"""Interactive release tool for npm type-declaration packages."""

__version__ = "0.1.0"
