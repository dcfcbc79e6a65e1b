"""Upstream access layer (GraphQL client, credentials, retry, metrics).

Packages:
- graphql: single-request GraphQL executor
- credentials: default bearer token holder
- retry: async retry with exponential backoff
- storage: signed URL upload
- metrics: Prometheus counters/histograms
"""

__all__ = [
    "graphql",
    "credentials",
    "retry",
    "storage",
    "metrics",
]
