"""
Repository Contents Client

Queries a GitHub-style contents API for the files present in a folder of
the book repository.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from .config import BuildConfig
from .errors import RemoteFetchError
from .fetcher import create_session, perform_get


LISTING_HEADERS = {'Accept': 'application/vnd.github+json'}


@dataclass(frozen=True)
class RemoteFile:
    name: str
    download_url: str


class ContentsClient:
    """
    Client for the repository contents listing endpoint.

    A listing is a JSON array of entries carrying (among unused fields) a
    'name' and a 'download_url'. Folders appear with a null download_url
    and are skipped.
    """

    def __init__(self, config: BuildConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.session = session or create_session()

    def list_folder(self, folder: str = "") -> List[RemoteFile]:
        """
        List the files in a repository folder.

        Args:
            folder: Folder path relative to the repository root ('' for the root)

        Returns:
            RemoteFile entries in the order the listing reports them

        Raises:
            RemoteFetchError: If the request fails or the payload is not a listing
        """
        url = self.config.listing_url(folder)
        label = folder or "<root>"
        self.logger.debug(f"Listing repository folder {label}: {url}")

        response = perform_get(self.session, url, self.config.request_timeout, self.logger,
                               what="repository contents", headers=LISTING_HEADERS)
        try:
            data = response.json()
        except ValueError as e:
            self.logger.error(f"Invalid JSON in contents listing for {label}: {e}")
            raise RemoteFetchError("Contents listing is not valid JSON", url=url) from e

        if not isinstance(data, list):
            message = data.get('message') if isinstance(data, dict) else None
            self.logger.error(f"Unexpected contents listing for {label}: {message or type(data).__name__}")
            raise RemoteFetchError(f"Unexpected contents listing: {message or 'not a list'}", url=url)

        files = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            name = entry.get('name')
            download_url = entry.get('download_url')
            if not name or not download_url:
                continue
            files.append(RemoteFile(name=name, download_url=download_url))

        self.logger.info(f"Found {len(files)} files in {label}")
        return files

    def close(self):
        """Close the HTTP session."""
        self.session.close()
