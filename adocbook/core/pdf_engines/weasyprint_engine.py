"""
WeasyPrint PDF Engine

Offline alternative to the Chromium engine. WeasyPrint does not run
scripts, so math is left as TeX source. Resources are constrained to the
local filesystem via a url_fetcher that denies http(s) requests.
"""

import logging
import os
from typing import Optional

from weasyprint import HTML, CSS, default_url_fetcher

from ..config import BuildConfig
from ..errors import RenderError
from .readiness import GateResult, Readiness


PAGE_CSS = """
@page {{
    size: {size};
    margin: {margin};
    @top-center {{ content: none; }}
    @bottom-center {{ content: counter(page); font-size: 10px; }}
}}
"""


class WeasyPrintEngine:
    def __init__(self, config: BuildConfig):
        self.config = config
        self.logger = logging.getLogger(__name__)

    def _local_only_fetcher(self, allowed_base: Optional[str] = None):
        """
        Return a url_fetcher for WeasyPrint that only allows local files and
        data URIs, optionally restricted to allowed_base.
        """

        def fetch(url, *args, **kwargs):
            if url.startswith('http://') or url.startswith('https://'):
                raise ValueError(f"Remote fetch blocked: {url}")
            if allowed_base and url.startswith('file://'):
                abs_path = os.path.abspath(url[7:])
                if not abs_path.startswith(os.path.abspath(allowed_base)):
                    raise ValueError(f"Access outside allowed base blocked: {url}")
            return default_url_fetcher(url, *args, **kwargs)

        return fetch

    def generate(self, html_content: str, output_path: str) -> Readiness:
        math = GateResult(False, "Math typesetting is not available in the WeasyPrint engine")
        if self.config.abort_on_unready:
            raise RenderError(math.detail, path=output_path)

        os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

        base_url = str(self.config.temp_root.resolve())
        page_css = CSS(string=PAGE_CSS.format(size=self.config.page_format, margin=self.config.margin))
        try:
            html = HTML(string=html_content, base_url=base_url,
                        url_fetcher=self._local_only_fetcher(allowed_base=base_url))
            self.logger.info("Generating PDF with WeasyPrint...")
            html.write_pdf(output_path, stylesheets=[page_css])
        except Exception as e:
            self.logger.error(f"WeasyPrint generation failed: {e}")
            raise RenderError(f"WeasyPrint generation failed: {e}", path=output_path) from e

        self.logger.warning(math.detail)
        return Readiness(math=math, images=GateResult(True, "Images embedded as data URIs"))
