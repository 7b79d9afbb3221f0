"""
Client for the Semantria text-analysis API.

This package contains:

- request signing (the legacy OAuth-style HMAC scheme the service expects)
- a request executor that runs one signed call per pending future
- thin routing helpers for the document, configuration and category endpoints
- configuration loading (environment variables) and logging setup
"""

__version__ = "0.1.0"
