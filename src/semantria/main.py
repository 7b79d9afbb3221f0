"""
Semantria Connectivity Check
============================

This script is the command-line entry point of the Semantria client. It
loads the configuration from the environment, configures logging, and
performs one signed call (listing the account's configurations) to verify
that the credentials are accepted by the service.

The process exit code reflects the outcome: 0 when the service accepted the
call, 1 on configuration errors, remote rejections and transport failures.
"""

import sys

import requests
import structlog

from .client import SemantriaClient
from .config import Settings
from .exceptions import RemoteRejection
from .logging_config import configure_logging


def main() -> int:
    """Run the connectivity check and return the process exit code."""
    log = structlog.get_logger(__name__)

    try:
        settings = Settings()
        configure_logging(settings)
    except ValueError as e:
        log.error("Configuration error", error=str(e))
        return 1

    log.info(
        "Checking Semantria credentials",
        api_url=settings.SEMANTRIA_API_URL,
        app_name=settings.SEMANTRIA_APP_NAME,
        compression=settings.SEMANTRIA_USE_COMPRESSION,
    )

    with SemantriaClient(settings) as client:
        try:
            result = client.retrieve_configurations().result()
        except RemoteRejection as e:
            log.error(
                "Semantria rejected the credentials",
                status_code=e.status_code,
                body=e.body,
            )
            return 1
        except requests.exceptions.RequestException as e:
            log.error("Could not reach Semantria", error=str(e))
            return 1

    log.info(
        "Semantria credentials accepted",
        status_code=result.status_code,
        body_length=len(result.body),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
