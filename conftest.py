"""Shared fakes for the network layer."""

import json

import pytest
import requests

from adocbook.core.config import BuildConfig


API = "https://api.example.com/repos/acme/book/contents"
RAW = "https://raw.example.com/acme/book/main"


class FakeResponse:
    def __init__(self, url, status_code=200, content=b"", payload=None):
        self.url = url
        self.status_code = status_code
        self.content = content if payload is None else json.dumps(payload).encode("utf-8")

    def json(self):
        return json.loads(self.content.decode("utf-8"))

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} for {self.url}", response=self)


class FakeSession:
    """Serves canned responses by URL; anything else is a 404."""

    def __init__(self, routes=None, failures=None):
        self.routes = dict(routes or {})
        self.failures = dict(failures or {})
        self.headers = {}
        self.requested = []
        self.closed = False

    def get(self, url, timeout=None, **kwargs):
        self.requested.append((url, timeout))
        if url in self.failures:
            raise self.failures[url]
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(url, status_code=404)
        if isinstance(route, FakeResponse):
            return route
        if isinstance(route, (list, dict)):
            return FakeResponse(url, payload=route)
        if isinstance(route, str):
            return FakeResponse(url, content=route.encode("utf-8"))
        return FakeResponse(url, content=route)

    def close(self):
        self.closed = True


def listing_entry(folder, name, kind="file"):
    path = f"{folder}/{name}" if folder else name
    return {
        "name": name,
        "path": path,
        "type": kind,
        "download_url": f"{RAW}/{path}" if kind == "file" else None,
    }


def book_routes(chapters, code=None, images=None, extra_root=()):
    """Routes for a repository with the given chapter texts, code files and images."""
    code = code or {}
    images = images or {}
    routes = {
        f"{API}/": [listing_entry("", name) for name in chapters] + list(extra_root),
        f"{API}/code": [listing_entry("code", name) for name in code],
        f"{API}/images": [listing_entry("images", name) for name in images],
    }
    for name, text in chapters.items():
        routes[f"{RAW}/{name}"] = text
    for name, text in code.items():
        routes[f"{RAW}/code/{name}"] = text
    for name, data in images.items():
        routes[f"{RAW}/images/{name}"] = data
    return routes


@pytest.fixture
def config(tmp_path):
    return BuildConfig(
        api_base=API,
        output_file=str(tmp_path / "book.pdf"),
        temp_dir=str(tmp_path / "temp_adoc_files"),
        max_workers=4,
        log_dir=str(tmp_path / "logs"),
    )
