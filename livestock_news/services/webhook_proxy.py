"""
Webhook Relay Service

Forwards a JSON payload to a caller-supplied webhook URL (Zapier and
similar) so browser clients can reach it without CORS restrictions.
"""

import logging
import os
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from livestock_news.services.http_client import create_client

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT = float(os.environ.get('WEBHOOK_TIMEOUT', 15))


class WebhookRelayError(Exception):
    """Raised when the upstream webhook cannot be reached or rejects the payload."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.details = details


def validate_webhook_url(url) -> str:
    """
    Check the webhook URL is an absolute http(s) URL.

    Raises:
        ValueError: if the URL is missing or not http(s)
    """
    if not url or not isinstance(url, str):
        raise ValueError("Webhook URL is required")
    parsed = urlparse(url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise ValueError("Webhook URL must be an absolute http(s) URL")
    return url.strip()


def relay_webhook(
    webhook_url: str,
    data: Any,
    timeout: float = WEBHOOK_TIMEOUT,
    transport: Optional[httpx.BaseTransport] = None,
) -> dict:
    """
    POST data as JSON to webhook_url and relay the upstream response.

    Returns:
        Dict with 'status' (upstream HTTP status) and 'data' (JSON body, or text)

    Raises:
        WebhookRelayError: on network errors or non-2xx upstream responses
    """
    logger.info(f"Proxying webhook to {urlparse(webhook_url).netloc}")

    with create_client(timeout, transport=transport) as client:
        try:
            response = client.post(webhook_url, json=data)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"Webhook rejected payload: HTTP {e.response.status_code}")
            raise WebhookRelayError(
                f"Webhook returned HTTP {e.response.status_code}",
                details=_response_body(e.response),
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"Webhook request error: {e}")
            raise WebhookRelayError(str(e) or e.__class__.__name__) from e

        return {'status': response.status_code, 'data': _response_body(response)}


def _response_body(response: httpx.Response) -> Any:
    """JSON body when available, raw text otherwise."""
    try:
        return response.json()
    except ValueError:
        return response.text or None
