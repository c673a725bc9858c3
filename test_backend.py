#!/usr/bin/env python3
"""
Backend tests for adocbook: configuration, logging, and the full build
pipeline with the network, converter and PDF engine replaced by fakes.
"""

import logging

import pytest

from adocbook import cli
from adocbook.core.config import BuildConfig
from adocbook.core.controller import BookBuilder
from adocbook.core.errors import ConfigError, RemoteFetchError, RenderError
from adocbook.core.logger import initialize_logging, get_logger, create_error_tracker
from adocbook.core.pdf_generator import ExportResult

from conftest import API, book_routes, FakeSession


class FakeRenderer:
    """Records the merged document and returns fixed HTML."""

    def __init__(self, config):
        self.config = config
        self.merged = None
        self.images_present = []

    def render(self, merged_text):
        self.merged = merged_text
        self.images_present = sorted(p.name for p in self.config.images_dir.iterdir())
        return "<h2>Book</h2><p>\\(x\\)</p><img src='fig.png'>"


class FakePDF:
    def __init__(self, fail=False):
        self.fail = fail
        self.pages = []

    def generate_pdf(self, html_content, output_path):
        if self.fail:
            raise RenderError("browser crashed", path=output_path)
        self.pages.append(html_content)
        with open(output_path, "wb") as f:
            f.write(b"%PDF-1.4 fake")
        return ExportResult(path=output_path, page_count=1, math_ready=True, images_ready=True)


CHAPTERS = {
    "ch02_overview.adoc": "== Overview\n\nimage::images/overview.png[Overview diagram]",
    "ch01_intro.adoc": "== Intro\n\ninclude::code/addr.py[]",
    "ch03_wallets.adoc": "== Wallets",
}


def _builder(config, routes, failures=None, pdf=None):
    builder = BookBuilder(config, session=FakeSession(routes, failures))
    builder.renderer = FakeRenderer(config)
    builder.pdf = pdf or FakePDF()
    return builder


@pytest.mark.integration
def test_full_build_with_fakes(config, tmp_path):
    routes = book_routes(
        CHAPTERS,
        code={"addr.py": "print('address')\n"},
        images={"overview.png": b"\x89PNG-overview"},
    )
    builder = _builder(config, routes)

    result = builder.run()

    assert result.chapters == ["ch01_intro.adoc", "ch02_overview.adoc", "ch03_wallets.adoc"]
    assert result.code_files == 1 and result.image_files == 1
    assert builder.renderer.images_present == ["overview.png"]
    merged = builder.renderer.merged
    assert merged.split("\n\n== ")[0].startswith("== Intro")
    assert "image::overview.png[Overview diagram]" in merged
    assert "image::images/" not in merged
    assert len(builder.pdf.pages) == 1 and "MathJax-script" in builder.pdf.pages[0]
    assert (tmp_path / "book.pdf").exists()
    assert not config.temp_root.exists()
    assert builder.state == "cleaned-up"


@pytest.mark.integration
def test_code_files_staged_byte_exact(config):
    listing = b"# caf\xe9 \xa9 latin-1\r\nprint(1)\r\n"
    config.keep_temp = True
    builder = _builder(config, book_routes(CHAPTERS, code={"legacy.py": listing}))

    builder.run()

    assert (config.code_dir / "legacy.py").read_bytes() == listing


@pytest.mark.unit
def test_default_session_pool_covers_both_stagers(config):
    builder = BookBuilder(config)
    try:
        adapter = builder.session.get_adapter(config.api_base)
        assert adapter.poolmanager.connection_pool_kw["maxsize"] == 2 * config.max_workers
    finally:
        builder.close()


@pytest.mark.integration
def test_zero_chapters_still_produces_pdf(config):
    routes = book_routes({}, extra_root=[{"name": "README.md", "download_url": "https://x/README.md"}])
    builder = _builder(config, routes)

    result = builder.run()

    assert builder.renderer.merged == ""
    assert result.chapters == []
    assert not config.temp_root.exists()


@pytest.mark.integration
def test_failed_image_download_aborts_without_pdf(config, tmp_path):
    routes = book_routes(CHAPTERS, images={"overview.png": b"png"})
    del routes[[u for u in routes if u.endswith("/images/overview.png")][0]]
    builder = _builder(config, routes)

    with pytest.raises(RemoteFetchError):
        builder.run()

    assert builder.renderer.merged is None
    assert not (tmp_path / "book.pdf").exists()
    assert builder.state == "idle"


@pytest.mark.integration
def test_failed_chapter_download_aborts_merge(config, tmp_path):
    routes = book_routes(CHAPTERS)
    del routes[[u for u in routes if u.endswith("/ch02_overview.adoc")][0]]
    builder = _builder(config, routes)

    with pytest.raises(RemoteFetchError):
        builder.run()

    assert builder.state == "staged"
    assert not (tmp_path / "book.pdf").exists()


@pytest.mark.integration
def test_export_failure_leaves_temp_directory(config):
    builder = _builder(config, book_routes(CHAPTERS), pdf=FakePDF(fail=True))
    with pytest.raises(RenderError):
        builder.run()
    assert config.temp_root.exists()


@pytest.mark.integration
def test_keep_temp(config):
    config.keep_temp = True
    _builder(config, book_routes(CHAPTERS)).run()
    assert config.merged_path.parent.exists()


@pytest.mark.unit
def test_config_defaults():
    config = BuildConfig().validate()
    assert config.listing_url("") == "https://api.github.com/repos/bitcoinbook/bitcoinbook/contents/"
    assert config.listing_url("images") == "https://api.github.com/repos/bitcoinbook/bitcoinbook/contents/images"
    assert config.output_file == "mastering-bitcoin.pdf"
    assert str(config.merged_path).endswith("temp_adoc_files/merged.adoc")
    assert config.request_timeout == 10.0
    assert config.margin == "20mm" and config.page_format == "A4"


@pytest.mark.unit
@pytest.mark.parametrize("overrides", [
    {"api_base": "ftp://example.com/contents"},
    {"api_base": ""},
    {"max_workers": 0},
    {"request_timeout": 0},
    {"engine": "wkhtmltopdf"},
])
def test_config_rejects_invalid_values(overrides):
    with pytest.raises(ConfigError):
        BuildConfig(**overrides).validate()


@pytest.mark.unit
def test_logging_system(tmp_path):
    initialize_logging(str(tmp_path / "logs"))
    logger = get_logger("test")
    logger.info("Logging system test - INFO level")

    tracker = create_error_tracker("test")
    try:
        raise RemoteFetchError("listing failed", url=f"{API}/")
    except RemoteFetchError as e:
        error_id = tracker.log_error(e, context="testing")

    assert error_id.startswith("ERR_")
    summary = tracker.get_error_summary()
    assert summary["total_errors"] == 1
    assert summary["error_types"] == {"RemoteFetchError": 1}
    for handler in logging.getLogger("adocbook").handlers:
        handler.flush()
    assert (tmp_path / "logs" / "adocbook.log").exists()


@pytest.mark.unit
def test_cli_swallows_build_errors(tmp_path, monkeypatch):
    class ExplodingBuilder:
        state = "idle"

        def __init__(self, config):
            self.config = config

        def run(self):
            raise RemoteFetchError("network down", url=f"{API}/")

        def close(self):
            pass

    monkeypatch.setattr(cli, "BookBuilder", ExplodingBuilder)
    code = cli.main(["--log-dir", str(tmp_path / "logs"), "--output", str(tmp_path / "out.pdf")])
    assert code == 0
    assert not (tmp_path / "out.pdf").exists()


@pytest.mark.unit
def test_cli_maps_arguments_to_config():
    args = cli.build_parser().parse_args([
        "--api-base", API, "-o", "book.pdf", "--workers", "3", "--engine", "weasyprint",
        "--strict", "--keep-temp", "--timeout", "5",
    ])
    config = cli.config_from_args(args).validate()
    assert config.api_base == API
    assert config.output_file == "book.pdf"
    assert config.max_workers == 3
    assert config.engine == "weasyprint"
    assert config.abort_on_unready and config.keep_temp
    assert config.request_timeout == 5.0
