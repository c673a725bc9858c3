"""
Build configuration.

A single BuildConfig is constructed at startup and handed to every stage.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError
from ..utils.validators import validate_url


DEFAULT_API_BASE = "https://api.github.com/repos/bitcoinbook/bitcoinbook/contents"
DEFAULT_MATHJAX_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-svg.js"

ENGINES = ("chromium", "weasyprint")


@dataclass
class BuildConfig:
    api_base: str = DEFAULT_API_BASE
    output_file: str = "mastering-bitcoin.pdf"
    temp_dir: str = "./temp_adoc_files"
    chapter_prefix: str = "ch"
    chapter_suffix: str = ".adoc"
    code_folder: str = "code"
    images_folder: str = "images"
    merged_name: str = "merged.adoc"
    request_timeout: float = 10.0
    max_workers: int = 8
    asciidoctor: str = "asciidoctor"
    listing_caption: str = "Listing"
    mathjax_url: str = DEFAULT_MATHJAX_URL
    viewport_width: int = 1200
    viewport_height: int = 800
    page_format: str = "A4"
    margin: str = "20mm"
    readiness_timeout: float = 30.0  # seconds, per gate
    abort_on_unready: bool = False
    engine: str = "chromium"
    keep_temp: bool = False
    log_dir: str = "logs"

    @property
    def temp_root(self) -> Path:
        return Path(self.temp_dir)

    @property
    def code_dir(self) -> Path:
        return self.temp_root / self.code_folder

    @property
    def images_dir(self) -> Path:
        return self.temp_root / self.images_folder

    @property
    def merged_path(self) -> Path:
        return self.temp_root / self.merged_name

    def listing_url(self, folder: str = "") -> str:
        """URL of the contents listing for a folder ('' is the repository root)."""
        base = self.api_base.rstrip("/")
        return f"{base}/{folder.strip('/')}"

    def validate(self) -> "BuildConfig":
        ok, _, err = validate_url(self.api_base)
        if not ok:
            raise ConfigError(f"Invalid API base: {err}", url=self.api_base)
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be positive, got {self.max_workers}")
        if self.request_timeout <= 0 or self.readiness_timeout <= 0:
            raise ConfigError("Timeouts must be positive")
        if self.engine not in ENGINES:
            raise ConfigError(f"Unknown engine '{self.engine}' (expected one of {', '.join(ENGINES)})")
        if not self.output_file:
            raise ConfigError("Output file cannot be empty")
        return self
