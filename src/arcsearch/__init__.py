"""ArcSearch — OpenSearch-backed content catalog for ANS stories."""

__version__ = "0.1.0"
