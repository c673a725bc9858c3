"""
Chapter merging.

Chapter sources reference figures as `image::images/<file>[<alt>]`. The
converter resolves images against `imagesdir`, which already points at the
staged images folder, so the `images/` segment is stripped before the
chapters are joined.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Sequence

from .contents_client import RemoteFile
from .fetcher import AssetFetcher
from ..utils.worker_pool import run_bounded


IMAGE_DIRECTIVE = re.compile(r"image::(.*?)\[(.*?)\]")
IMAGES_PREFIX = re.compile(r"^images/")

DOCUMENT_SEPARATOR = "\n\n"


def normalize_image_paths(text: str) -> str:
    """Strip a leading 'images/' from every image:: target, keeping the alt text verbatim."""

    def repl(m):
        image_path = IMAGES_PREFIX.sub('', m.group(1))
        return f"image::{image_path}[{m.group(2)}]"

    return IMAGE_DIRECTIVE.sub(repl, text)


def join_documents(texts: Iterable[str]) -> str:
    return DOCUMENT_SEPARATOR.join(texts)


class ChapterMerger:
    def __init__(self, fetcher: AssetFetcher, max_workers: int = 8):
        self.fetcher = fetcher
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)

    def merge(self, chapters: Sequence[RemoteFile]) -> str:
        """
        Download every chapter, normalize image paths and join in the given order.

        An empty chapter list yields an empty document. One failed download
        fails the merge.
        """
        chapters = list(chapters)
        if not chapters:
            self.logger.warning("No chapter files found; merged document is empty")
            return ""

        self.logger.info(f"Downloading {len(chapters)} chapters: {', '.join(c.name for c in chapters)}")
        texts: List[str] = run_bounded(lambda c: self.fetcher.fetch_text(c.download_url),
                                       chapters, self.max_workers)
        merged = join_documents(normalize_image_paths(t) for t in texts)
        self.logger.info(f"Merged {len(chapters)} chapters ({len(merged):,} characters)")
        return merged
