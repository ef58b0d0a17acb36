"""
Outbound HTTP settings shared by source adapters, the summary extractor
and the webhook relay.
"""

import os

import httpx

USER_AGENT = os.environ.get(
    'NEWS_USER_AGENT',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (compatible; LivestockNewsFinder/1.0)',
)

HTML_ACCEPT = 'text/html,application/xhtml+xml'
FEED_ACCEPT = 'application/rss+xml,application/atom+xml,application/xml,text/xml;q=0.9,*/*;q=0.8'


def create_client(timeout: float, transport: httpx.BaseTransport = None) -> httpx.Client:
    """
    Build a short-lived httpx client for one source or one request.

    Clients are never shared across search requests, so no cookies or
    connections outlive the request that created them.

    Args:
        timeout: Per-request timeout in seconds
        transport: Optional transport override (tests use httpx.MockTransport)
    """
    return httpx.Client(
        timeout=timeout,
        follow_redirects=True,
        headers={'User-Agent': USER_AGENT},
        transport=transport,
    )
