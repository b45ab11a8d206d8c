"""
Forwarding of validated requests to sibling functions.

Once the validation middleware accepts a payload it re-issues the request,
with the caller's headers, to ``<base>/<schema name>`` and relays whatever
the target answers.
"""

from typing import Any, Dict, Mapping, Optional

import httpx

from studyrooms.handlers.utils.errors import ForwardingError
from studyrooms.handlers.utils.observability import logger, tracer

# Headers describing the original connection, recomputed by httpx for the new request
EXCLUDED_HEADERS = frozenset({
    'host',
    'content-length',
    'connection',
    'keep-alive',
    'transfer-encoding',
    'upgrade',
    'proxy-authorization',
    'te',
    'trailer',
})


def derive_base_url(headers: Mapping[str, str], path: str) -> str:
    """Rebuild the URL a request was sent to from its Host and X-Forwarded-Proto headers."""
    normalized = {key.lower(): value for key, value in headers.items()}
    host = normalized.get('host')
    if not host:
        raise ForwardingError(message='Cannot determine forward target: request has no Host header')
    scheme = normalized.get('x-forwarded-proto', 'https').split(',')[0].strip()
    return f'{scheme}://{host}{path}'


def build_target_url(base_url: str, schema_name: str) -> str:
    return f'{base_url.rstrip("/")}/{schema_name}'


def forwardable_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    return {key: value for key, value in headers.items() if key.lower() not in EXCLUDED_HEADERS}


@tracer.capture_method
def forward_request(
    method: str,
    url: str,
    headers: Mapping[str, str],
    payload: Any,
    timeout: float = 10.0,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Response:
    """
    Send ``payload`` as JSON to ``url`` and return the target's response.

    Args:
        method: HTTP method of the original request
        url: Target URL
        headers: Original request headers; connection specific ones are dropped
        payload: Validated JSON payload
        timeout: Request timeout in seconds
        transport: Custom httpx transport, mainly for tests

    Raises:
        ForwardingError: If the target cannot be reached
    """
    tracer.put_annotation('forward_url', url)
    logger.info('Forwarding validated request', extra={'method': method, 'url': url})

    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            response = client.request(method, url, headers=forwardable_headers(headers), json=payload)
    except httpx.HTTPError as e:
        logger.error('Forwarding request failed', extra={'url': url, 'error': str(e)})
        raise ForwardingError(message=str(e), target_url=url) from e

    logger.info('Forward target responded', extra={'url': url, 'status_code': response.status_code})
    return response
