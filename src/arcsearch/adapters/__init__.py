"""Index adapter layer — Connectors between ArcSearch and the search engine.

Built-in adapters:
  - opensearch: OpenSearch v2+ / OpenSearch Serverless (SigV4-signed)

Implement ``IndexWriter`` and ``QueryExecutor`` to target another engine.
"""
