"""Content API request signing — time-based HMAC-SHA1.

The signature is HMAC-SHA1(shared_secret, str(unix_seconds) + api_key),
hex encoded. It embeds the current time, so it must be regenerated for
every outbound request; the Content API tolerates a small clock skew.
"""

from __future__ import annotations

import hashlib
import hmac
import time

from camayak_contentapi.config import Credentials


def generate_signature(
    api_key: str,
    shared_secret: str,
    timestamp: float | None = None,
) -> str:
    """Sign ``api_key`` for the given (or current) Unix time.

    Args:
        api_key: Content API key
        shared_secret: Shared secret of the publishing destination
        timestamp: Unix time in seconds; defaults to now

    Returns:
        Hex-encoded HMAC-SHA1 digest
    """
    ts = int(time.time() if timestamp is None else timestamp)
    return hmac.new(
        shared_secret.encode("utf-8"),
        f"{ts}{api_key}".encode("utf-8"),
        hashlib.sha1,
    ).hexdigest()


def signed_params(credentials: Credentials) -> dict[str, str]:
    """Query parameters authenticating one Content API request.

    ``api_sig`` is only present when a shared secret is configured.
    """
    params = {"api_key": credentials.api_key}
    if credentials.shared_secret:
        params["api_sig"] = generate_signature(
            credentials.api_key, credentials.shared_secret
        )
    return params
