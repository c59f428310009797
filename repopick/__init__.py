"""repopick: pick files from your GitHub repositories and combine them into one document."""

__version__ = "0.1.0"
