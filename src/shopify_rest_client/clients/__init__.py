"""HTTP clients for the Shopify Admin REST API."""

from .http_client import AsyncHttpClient, ExecutionState, HttpClient
from .rest import RestAdminClient

__all__ = ["AsyncHttpClient", "ExecutionState", "HttpClient", "RestAdminClient"]
