"""
adocbook Orchestrator: runs the end-to-end build.

Stages run in a fixed order: stage assets and list chapters (concurrently),
merge chapters, render HTML, print PDF, remove the scratch directory.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import requests

from .config import BuildConfig
from .contents_client import ContentsClient, RemoteFile
from .fetcher import AssetFetcher, create_session
from .listing import select_chapters, select_all
from .merger import ChapterMerger
from .pdf_generator import PDFGenerator
from .renderer import AsciidocRenderer, PageShell, document_stats
from .stager import AssetStager
from ..utils.file_manager import Workspace


@dataclass
class BuildResult:
    output: str
    page_count: Optional[int]
    chapters: List[str]
    code_files: int
    image_files: int
    math_ready: bool
    images_ready: bool


class BookBuilder:
    def __init__(self, config: BuildConfig, logger: Optional[logging.Logger] = None,
                 session: Optional[requests.Session] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        # code and images stage concurrently, each with up to max_workers threads
        self.session = session or create_session(pool_size=2 * config.max_workers)
        self.workspace = Workspace(config.temp_dir)
        self.contents = ContentsClient(config, session=self.session)
        self.fetcher = AssetFetcher(timeout=config.request_timeout, session=self.session)
        self.stager = AssetStager(self.fetcher, self.workspace, max_workers=config.max_workers)
        self.merger = ChapterMerger(self.fetcher, max_workers=config.max_workers)
        self.renderer = AsciidocRenderer(config, self.workspace)
        self.shell = PageShell(config)
        self.pdf = None  # created on first export; engine libraries load lazily
        self.state = "idle"

    def _advance(self, state: str):
        self.state = state
        self.logger.debug(f"Build state: {state}")

    def _stage_folder(self, folder: str, binary: bool) -> List[Path]:
        files = select_all(self.contents.list_folder(folder))
        return self.stager.stage(files, folder, binary=binary)

    def _list_chapters(self) -> List[RemoteFile]:
        chapters = select_chapters(self.contents.list_folder(""),
                                   self.config.chapter_prefix, self.config.chapter_suffix)
        self.logger.info(f"Selected {len(chapters)} chapter files")
        return chapters

    def run(self) -> BuildResult:
        """
        Build the PDF.

        Any stage failure propagates to the caller. The scratch directory is
        only removed after a successful export.
        """
        self.logger.info("Creating temporary directory...")
        self.workspace.create()

        self.logger.info("Processing code, image and chapter files...")
        with ThreadPoolExecutor(max_workers=3) as ex:
            code_future = ex.submit(self._stage_folder, self.config.code_folder, True)
            images_future = ex.submit(self._stage_folder, self.config.images_folder, True)
            chapters_future = ex.submit(self._list_chapters)
            code_files = code_future.result()
            image_files = images_future.result()
            chapters = chapters_future.result()
        self._advance("staged")

        merged = self.merger.merge(chapters)
        self._advance("merged")

        body = self.renderer.render(merged)
        stats = document_stats(body)
        self.logger.info(f"Document: {stats['word_count']:,} words, {stats['image_count']} images, "
                         f"{stats['math_count']} math expressions, {stats['listing_count']} listings")
        page = self.shell.wrap(body, title=stats['title'] or None)
        self._advance("html-rendered")

        if self.pdf is None:
            self.pdf = PDFGenerator(self.config)
        export = self.pdf.generate_pdf(page, self.config.output_file)
        self._advance("pdf-written")

        if self.config.keep_temp:
            self.logger.info(f"Keeping temporary directory: {self.workspace.root}")
        else:
            self.workspace.remove()
        self._advance("cleaned-up")

        return BuildResult(
            output=export.path,
            page_count=export.page_count,
            chapters=[c.name for c in chapters],
            code_files=len(code_files),
            image_files=len(image_files),
            math_ready=export.math_ready,
            images_ready=export.images_ready,
        )

    def close(self):
        """Close the shared HTTP session."""
        self.session.close()
