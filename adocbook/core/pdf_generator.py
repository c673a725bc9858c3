"""
PDF Generation Module

Selects the configured engine (headless Chromium by default, WeasyPrint as
the offline alternative), prints the wrapped HTML and reports the result.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from .config import BuildConfig
from .errors import RenderError
from ..utils.pdf_info import page_count


@dataclass
class ExportResult:
    path: str
    page_count: Optional[int]
    math_ready: bool
    images_ready: bool


class PDFGenerator:
    """Generates the output PDF from a complete HTML page."""

    def __init__(self, config: BuildConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.engine = self._create_engine(config.engine)

    def _create_engine(self, name: str):
        # Engines import their browser/layout library on first use
        if name == "weasyprint":
            from .pdf_engines.weasyprint_engine import WeasyPrintEngine
            return WeasyPrintEngine(self.config)
        from .pdf_engines.chromium_engine import ChromiumEngine
        return ChromiumEngine(self.config)

    def generate_pdf(self, html_content: str, output_path: str = None) -> ExportResult:
        """
        Print a complete HTML page to PDF.

        Args:
            html_content: Wrapped HTML page
            output_path: Target PDF path (defaults to the configured output file)

        Raises:
            RenderError: If the engine fails or produces no file
        """
        output_path = output_path or self.config.output_file
        readiness = self.engine.generate(html_content, output_path)

        if not os.path.exists(output_path) or os.path.getsize(output_path) == 0:
            self.logger.error(f"PDF was not written: {output_path}")
            raise RenderError("PDF file was not generated", path=output_path)

        pages = page_count(output_path)
        self.logger.info(f"PDF saved as {output_path} ({pages} pages, {os.path.getsize(output_path):,} bytes)")
        return ExportResult(
            path=output_path,
            page_count=pages,
            math_ready=readiness.math.ready,
            images_ready=readiness.images.ready,
        )
