"""
Core utilities — exceptions and cross-cutting concerns.

Shared by the fetcher, worker pools, analysis engine and API server.
"""
