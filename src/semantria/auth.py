"""
Request Signing
===============

Semantria authenticates every call with an OAuth 1.0 flavoured scheme:
five ``oauth_*`` parameters are appended to the request URL, and an
``Authorization`` header carries an HMAC-SHA1 signature over the
percent-encoded URL.

The signing key is *not* the consumer secret itself but the hex MD5 digest
of it. That construction is mandated by the service and has to be
reproduced byte for byte, otherwise every request is refused.

See https://semantria.com/developer/api-overview/authentication/authorization-header
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import random
import time
from dataclasses import dataclass
from urllib.parse import quote

OAUTH_VERSION = "1.0"
SIGNATURE_METHOD = "HMAC-SHA1"

CONSUMER_KEY_KEY = "oauth_consumer_key"
NONCE_KEY = "oauth_nonce"
SIGNATURE_KEY = "oauth_signature"
SIGNATURE_METHOD_KEY = "oauth_signature_method"
TIMESTAMP_KEY = "oauth_timestamp"
VERSION_KEY = "oauth_version"

# Upper bound (exclusive) for generated nonces
NONCE_LIMIT = 9999999

# Characters JavaScript's encodeURIComponent leaves alone on top of the
# alphanumerics and "_.-~" that quote() always keeps.
_URI_COMPONENT_SAFE = "!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode ``value`` the same way the service's reference SDKs do."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


@dataclass(frozen=True)
class Credentials:
    """Consumer key/secret plus the identity fields sent with every call."""

    consumer_key: str
    consumer_secret: str
    application_name: str = ""
    accept_encoding: str = "identity"

    @classmethod
    def create(
        cls,
        consumer_key: str,
        consumer_secret: str,
        application_name: str | None = None,
        use_compression: bool = False,
    ) -> "Credentials":
        return cls(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            application_name=f"{application_name}/" if application_name else "",
            accept_encoding="gzip, deflate" if use_compression else "identity",
        )


class AuthRequest:
    """
    Builds the signed query string and headers for a single request.

    The signer is stateless apart from the credentials it was created with,
    so one instance may be shared by concurrent calls.
    """

    def __init__(self, credentials: Credentials):
        self.credentials = credentials

    def generate_nonce(self) -> int:
        """Return a pseudo-random nonce; uniqueness is best effort only."""
        return random.randrange(NONCE_LIMIT)

    def generate_timestamp(self) -> int:
        """Return the current time in milliseconds since the epoch."""
        return int(time.time() * 1000)

    def get_normalized_parameters(self, timestamp, nonce) -> str:
        items = {
            CONSUMER_KEY_KEY: self.credentials.consumer_key,
            NONCE_KEY: nonce,
            SIGNATURE_METHOD_KEY: SIGNATURE_METHOD,
            TIMESTAMP_KEY: timestamp,
            VERSION_KEY: OAUTH_VERSION,
        }
        return "&".join(f"{key}={value}" for key, value in items.items())

    def generate_query(self, method: str, url: str, timestamp, nonce) -> str:
        """
        Append the normalized OAuth parameters to ``url``.

        ``method`` is part of the signing contract but does not take part
        in the normalized parameters.
        """
        separator = "&" if "?" in url else "?"
        return url + separator + self.get_normalized_parameters(timestamp, nonce)

    def generate_auth_header(self, query: str, timestamp, nonce) -> str:
        escaped_query = encode_uri_component(query)
        signing_key = hashlib.md5(
            self.credentials.consumer_secret.encode("utf-8")
        ).hexdigest()
        digest = hmac.new(
            signing_key.encode("utf-8"),
            escaped_query.encode("utf-8"),
            hashlib.sha1,
        ).digest()
        signature = encode_uri_component(base64.b64encode(digest).decode("ascii"))

        fields = [
            ("OAuth", ""),
            (VERSION_KEY, f'"{OAUTH_VERSION}"'),
            (SIGNATURE_METHOD_KEY, f'"{SIGNATURE_METHOD}"'),
            (NONCE_KEY, f'"{nonce}"'),
            (CONSUMER_KEY_KEY, f'"{self.credentials.consumer_key}"'),
            (TIMESTAMP_KEY, f'"{timestamp}"'),
            (SIGNATURE_KEY, f'"{signature}"'),
        ]
        return ",".join(f"{key}={value}" if value else key for key, value in fields)

    def get_request_headers(self, method: str, nonce, timestamp, query: str) -> dict[str, str]:
        """Return the full header mapping for a signed request."""
        headers = {"Authorization": self.generate_auth_header(query, timestamp, nonce)}
        if method == "POST":
            headers["Content-type"] = "application/x-www-form-urlencoded"
        headers["x-app-name"] = self.credentials.application_name
        headers["Accept-Encoding"] = self.credentials.accept_encoding
        return headers
