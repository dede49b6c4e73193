"""OpenSearch adapter for the DBaaS aggregator."""

__version__ = "1.0.0"
