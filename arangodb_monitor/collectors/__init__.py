from .arangodb_collector import ArangoDBCollector, CycleSummary
from .http_client import create_http_client

__all__ = [
    "ArangoDBCollector",
    "CycleSummary",
    "create_http_client",
]
