"""
Chromium PDF Engine

Primary engine: loads the page in headless Chromium through Playwright,
waits for math typesetting and image decoding, then prints to PDF.
"""

import logging
import os

from playwright.sync_api import sync_playwright, Error as PlaywrightError

from ..config import BuildConfig
from ..errors import RenderError
from .readiness import ReadinessGate, Readiness


FOOTER_TEMPLATE = ('<div style="font-size: 10px; text-align: center; width: 100%;">'
                   '<span class="pageNumber"></span></div>')
HEADER_TEMPLATE = '<div></div>'

LAUNCH_ARGS = ['--no-sandbox', '--disable-setuid-sandbox']


class ChromiumEngine:
    def __init__(self, config: BuildConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.gate = ReadinessGate(timeout=config.readiness_timeout)

    def pdf_options(self, output_path: str) -> dict:
        m = self.config.margin
        return {
            'path': output_path,
            'format': self.config.page_format,
            'print_background': True,
            'margin': {'top': m, 'right': m, 'bottom': m, 'left': m},
            'display_header_footer': True,
            'header_template': HEADER_TEMPLATE,
            'footer_template': FOOTER_TEMPLATE,
        }

    def generate(self, html_content: str, output_path: str) -> Readiness:
        """
        Print HTML to PDF.

        Returns:
            Readiness flags of the math and image gates at capture time

        Raises:
            RenderError: If the browser fails, or a gate fails while
                abort_on_unready is set
        """
        os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

        self.logger.info("Launching Chromium...")
        try:
            with sync_playwright() as p:
                browser = p.chromium.launch(args=LAUNCH_ARGS)
                try:
                    page = browser.new_page(
                        viewport={'width': self.config.viewport_width, 'height': self.config.viewport_height},
                        java_script_enabled=True,
                    )
                    page.on('console', lambda msg: self.logger.debug(f"Page log: {msg.text}"))
                    page.on('pageerror', lambda err: self.logger.error(f"Page error: {err}"))
                    page.on('crash', lambda _: self.logger.error("Page error: renderer process crashed"))

                    self.logger.info("Setting page content...")
                    page.set_content(html_content)

                    readiness = Readiness(
                        math=self.gate.wait_for_math(page),
                        images=self.gate.wait_for_images(page),
                    )
                    if not readiness.ready and self.config.abort_on_unready:
                        raise RenderError(
                            f"Page not ready for capture (math: {readiness.math.detail}; "
                            f"images: {readiness.images.detail})",
                            path=output_path,
                        )

                    self.logger.info("Generating PDF...")
                    page.pdf(**self.pdf_options(output_path))
                finally:
                    browser.close()
        except PlaywrightError as e:
            self.logger.error(f"Chromium PDF generation failed: {e}")
            raise RenderError(f"Chromium PDF generation failed: {e}", path=output_path) from e

        return readiness
