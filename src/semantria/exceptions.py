"""
Exceptions raised by the Semantria client.

Transport failures are not wrapped: they reach the caller as the original
``requests.exceptions.RequestException`` instance.
"""


class SemantriaError(Exception):
    """Base class for errors originating in this package."""


class RemoteRejection(SemantriaError):
    """The service answered with a status other than 200 or 202."""

    def __init__(self, body: str, status_code: int):
        super().__init__(f"Semantria rejected the request with HTTP {status_code}")
        self.body = body
        self.status_code = status_code


class UsageError(SemantriaError, ValueError):
    """The caller asked for something the service contract does not allow."""
