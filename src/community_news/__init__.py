"""Community-safety news aggregation and article extraction."""

__version__ = "0.1.0"
