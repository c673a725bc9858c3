"""
Asset Download Module

Downloads listed files as text or raw bytes with a fixed timeout over
IPv4-only connections. Failures are logged and raised, never retried.
"""

import logging
from typing import Optional, Union

import requests
from requests.adapters import HTTPAdapter

from .errors import RemoteFetchError


USER_AGENT = 'adocbook/1.0 (AsciiDoc Book Exporter)'


class IPv4Adapter(HTTPAdapter):
    """Transport adapter that binds outgoing sockets to an IPv4 source address."""

    def init_poolmanager(self, *args, **kwargs):
        kwargs['source_address'] = ('0.0.0.0', 0)
        super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args, **kwargs):
        kwargs['source_address'] = ('0.0.0.0', 0)
        return super().proxy_manager_for(*args, **kwargs)


def create_session(pool_size: int = 10) -> requests.Session:
    """Session with IPv4 adapters mounted for both schemes."""
    session = requests.Session()
    adapter = IPv4Adapter(pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    session.headers.update({'User-Agent': USER_AGENT})
    return session


def perform_get(session: requests.Session, url: str, timeout: float, logger: logging.Logger,
                what: str = "file", **kwargs) -> requests.Response:
    """
    GET a URL and return the successful response.

    Raises:
        RemoteFetchError: on timeout, connection failure or non-2xx status
    """
    try:
        response = session.get(url, timeout=timeout, **kwargs)
        response.raise_for_status()
        return response
    except requests.exceptions.Timeout as e:
        logger.error(f"Timeout downloading {what} after {timeout:.0f}s: {url}")
        raise RemoteFetchError(f"Timeout downloading {what}", url=url) from e
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        logger.error(f"HTTP error {status_code} downloading {what}: {url}")
        raise RemoteFetchError(f"HTTP {status_code} downloading {what}", url=url,
                               status_code=status_code) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Error downloading {what}: {url} ({e})")
        raise RemoteFetchError(f"Error downloading {what}: {e}", url=url) from e


class AssetFetcher:
    """Fetches file content from download URLs."""

    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None,
                 pool_size: int = 10):
        """
        Args:
            timeout: Per-request timeout in seconds
            session: Optional pre-built session (tests inject fakes here)
            pool_size: Connection pool size, matched to the worker count
        """
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        self.session = session or create_session(pool_size)

    def fetch(self, url: str, binary: bool = False) -> Union[str, bytes]:
        return self.fetch_bytes(url) if binary else self.fetch_text(url)

    def fetch_text(self, url: str) -> str:
        response = perform_get(self.session, url, self.timeout, self.logger)
        # Chapter sources are UTF-8 whatever charset the server declares
        return response.content.decode('utf-8', errors='replace')

    def fetch_bytes(self, url: str) -> bytes:
        response = perform_get(self.session, url, self.timeout, self.logger)
        return response.content

    def close(self):
        """Close the HTTP session."""
        self.session.close()
