"""Utility modules for the Shopify REST client."""
