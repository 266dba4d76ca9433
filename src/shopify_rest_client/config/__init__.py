"""Configuration for the Shopify REST client."""

from .settings import HttpClientConfig, Settings

__all__ = ["HttpClientConfig", "Settings"]
