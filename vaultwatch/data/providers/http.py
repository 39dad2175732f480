"""Shared HTTP helpers for provider clients."""

import logging
import threading
from typing import Any

import requests

from vaultwatch.data.providers.base import SourcePayloadError, SourceTransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

_local = threading.local()


def create_session() -> requests.Session:
    """Create a session that asks for JSON bodies."""
    session = requests.Session()
    session.headers.update({"Accept": "application/json"})
    return session


def thread_session() -> requests.Session:
    """Session owned by the calling thread; never shared across workers."""
    session = getattr(_local, "session", None)
    if session is None:
        session = create_session()
        _local.session = session
    return session


def request_json(
    session: requests.Session,
    method: str,
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    **kwargs: Any,
) -> Any:
    """Send a request and decode its JSON body.

    Raises:
        SourceTransportError: Timeout, connection failure or non-2xx status.
        SourcePayloadError: Body is not valid JSON.
    """
    logger.debug(f"Request: {method} {url} {kwargs.get('params') or ''}")
    try:
        response = session.request(method, url, timeout=timeout, **kwargs)
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        raise SourceTransportError(f"Request timeout: {url}") from e
    except requests.exceptions.ConnectionError as e:
        raise SourceTransportError(f"Connection error: {e}") from e
    except requests.exceptions.HTTPError as e:
        raise SourceTransportError(f"HTTP error: {e}") from e
    except requests.exceptions.RequestException as e:
        raise SourceTransportError(f"Request failed: {e}") from e

    try:
        return response.json()
    except ValueError as e:
        raise SourcePayloadError(f"Invalid JSON from {url}: {e}") from e
