"""
Configuration module for the Semantria client.

This module centralizes the loading and validation of all configuration
parameters from environment variables. It provides a single `Settings`
class that acts as a container for all configurable values, ensuring
that they are defined in one place and can be easily imported and used
throughout the application.
"""

import os

from . import __version__
from .auth import Credentials

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off", "")


class Settings:
    """
    A container for all configuration settings, loaded from environment variables.

    This class centralizes configuration, providing default values for optional
    settings and raising errors for missing required settings.
    """

    # --- Semantria API Configuration ---
    SEMANTRIA_API_URL: str
    SEMANTRIA_CONSUMER_KEY: str
    SEMANTRIA_CONSUMER_SECRET: str

    # --- Request Identity ---
    SEMANTRIA_APP_NAME: str
    SEMANTRIA_USE_COMPRESSION: bool

    # --- Transport Configuration ---
    REQUEST_TIMEOUT: float | None

    # --- Routing Limits ---
    MAX_BATCH_SIZE: int

    # --- Logging ---
    LOG_LEVEL: str
    LOG_FORMAT: str

    def __init__(self):
        """
        Loads settings from environment variables and performs validation.
        """
        # --- Semantria API Configuration ---
        self.SEMANTRIA_API_URL = os.getenv(
            "SEMANTRIA_API_URL", "https://api30.semantria.com"
        ).rstrip("/")
        self.SEMANTRIA_CONSUMER_KEY = self._get_required_env("SEMANTRIA_CONSUMER_KEY")
        self.SEMANTRIA_CONSUMER_SECRET = self._get_required_env(
            "SEMANTRIA_CONSUMER_SECRET"
        )

        # --- Request Identity ---
        self.SEMANTRIA_APP_NAME = os.getenv(
            "SEMANTRIA_APP_NAME", f"Python/{__version__}/json"
        )
        self.SEMANTRIA_USE_COMPRESSION = self._get_bool_env(
            "SEMANTRIA_USE_COMPRESSION", False
        )

        # --- Transport Configuration ---
        timeout = float(os.getenv("REQUEST_TIMEOUT", 180))
        if timeout < 0:
            raise ValueError("REQUEST_TIMEOUT must be >= 0")
        # 0 means "wait forever", which requests spells as None
        self.REQUEST_TIMEOUT = timeout or None

        # --- Routing Limits ---
        self.MAX_BATCH_SIZE = int(os.getenv("MAX_BATCH_SIZE", 10))
        if self.MAX_BATCH_SIZE < 1:
            raise ValueError("MAX_BATCH_SIZE must be >= 1")

        # --- Logging ---
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.LOG_FORMAT = os.getenv("LOG_FORMAT", "console").lower()
        if self.LOG_FORMAT not in ("console", "json"):
            raise ValueError("LOG_FORMAT must be 'console' or 'json'")

    def credentials(self) -> Credentials:
        """Build the immutable signing credentials for this configuration."""
        return Credentials.create(
            self.SEMANTRIA_CONSUMER_KEY,
            self.SEMANTRIA_CONSUMER_SECRET,
            self.SEMANTRIA_APP_NAME,
            self.SEMANTRIA_USE_COMPRESSION,
        )

    def _get_required_env(self, var_name: str) -> str:
        """
        Gets a required environment variable, raising an error if it's not set.
        """
        value = os.getenv(var_name)
        if value is None:
            raise ValueError(f"Required environment variable '{var_name}' is not set.")
        return value

    def _get_bool_env(self, var_name: str, default: bool) -> bool:
        value = os.getenv(var_name)
        if value is None:
            return default
        normalized = value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ValueError(f"{var_name} must be a boolean (got {value!r})")
