"""neokube - adaptive read caching for the Neo4j Kubernetes operator."""

__version__ = "0.1.0"
