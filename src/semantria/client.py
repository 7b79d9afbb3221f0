"""
Semantria API Client
====================

This module provides a client for the Semantria document, configuration and
category endpoints. Each method is a thin routing wrapper: it picks the HTTP
verb, the endpoint URL and the payload, and hands them to a
`RequestExecutor`, which signs the request and settles the returned future.

The `SemantriaClient` class is designed to be a reusable and testable
component; pass in a prepared executor to control transport behaviour.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any

import structlog

from .config import Settings
from .exceptions import UsageError
from .executor import ProcessedListener, RequestExecutor

log = structlog.get_logger(__name__)


class SemantriaClient:
    """A client for interacting with the Semantria API."""

    def __init__(self, settings: Settings, executor: RequestExecutor | None = None):
        self.settings = settings
        self.executor = executor or RequestExecutor(
            settings.credentials(),
            timeout=settings.REQUEST_TIMEOUT,
        )

    def __enter__(self) -> "SemantriaClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.executor.close()

    def on_processed(self, listener: ProcessedListener) -> None:
        """
        Register a callback for inline (HTTP 200) analysis results.

        The service only answers inline when the configuration used has
        auto-response enabled; otherwise results must be polled for with
        `retrieve_document`.
        """
        self.executor.add_listener(listener)

    def _url(self, path: str) -> str:
        return f"{self.settings.SEMANTRIA_API_URL}/{path}"

    def queue_document(self, text: str, doc_id: str) -> Future:
        """
        Queue a single document for processing.
        https://semantria.com/developer/data-processing/queuing/queuing-document
        """
        payload = {"id": doc_id, "text": text}
        return self.executor.execute("POST", self._url("document.json"), payload)

    def queue_document_batch(self, docs: list[dict[str, Any]]) -> Future:
        """
        Queue a batch of documents.

        Batches larger than ``MAX_BATCH_SIZE`` are refused locally: the
        returned future is already failed with a `UsageError` and nothing
        is sent.
        """
        if len(docs) > self.settings.MAX_BATCH_SIZE:
            log.warning(
                "Refusing oversized batch",
                batch_size=len(docs),
                max_batch_size=self.settings.MAX_BATCH_SIZE,
            )
            future: Future = Future()
            future.set_exception(
                UsageError(
                    f"batch too large: {len(docs)} documents "
                    f"(maximum is {self.settings.MAX_BATCH_SIZE})"
                )
            )
            return future
        return self.executor.execute("POST", self._url("document/batch.json"), docs)

    def retrieve_document(self, doc_id: str) -> Future:
        """
        Fetch the analysis results of a single queued document.
        """
        return self.executor.execute("GET", self._url(f"document/{doc_id}.json"))

    def retrieve_configurations(self) -> Future:
        return self.executor.execute("GET", self._url("configurations.json"))

    def update_configuration(self, configuration: Any) -> Future:
        """
        Update configurations; each entry must carry its ``config_id``.
        """
        return self.executor.execute(
            "POST", self._url("configurations.json"), configuration
        )

    def delete_configuration(self, config_ids: list[str]) -> Future:
        return self.executor.execute(
            "DELETE", self._url("configurations.json"), config_ids
        )

    def retrieve_categories(self, config_id: str | None = None) -> Future:
        """
        Fetch the categories of a configuration (the primary one by default).
        """
        payload = {"config_id": config_id or ""}
        return self.executor.execute("GET", self._url("categories.json"), payload)
