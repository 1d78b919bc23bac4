"""Base adapter interfaces — Abstract write and read sides of the index."""

from arcsearch.adapters.base.adapter import AdapterHealth, IndexWriter, QueryExecutor

__all__ = ["AdapterHealth", "IndexWriter", "QueryExecutor"]
