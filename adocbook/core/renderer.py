"""
AsciiDoc to HTML Rendering

Converts the merged document with the `asciidoctor` converter and wraps the
result in a minimal page that loads MathJax for client-side typesetting.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Any, List

from bs4 import BeautifulSoup
from jinja2 import Template

from .config import BuildConfig
from .errors import RenderError
from ..utils.file_manager import Workspace


_PAGE_TEMPLATE = Template("""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    {% if title %}<title>{{ title|e }}</title>{% endif %}
    <script>
        window.MathJax = {
            tex: {
                inlineMath: [['\\\\(', '\\\\)']],
                displayMath: [['\\\\[', '\\\\]']],
                processEscapes: true
            },
            svg: {
                fontCache: 'global'
            }
        };
    </script>
    <script id="MathJax-script" async src="{{ mathjax_url }}"></script>
    <style>
        img { max-width: 100%; height: auto; }
        .imageblock { text-align: center; margin: 1em 0; }
        .imageblock img { margin: 0 auto; display: block; }
        .imageblock .title { margin-top: 0.5em; font-style: italic; }
        {{ extra_css }}
    </style>
</head>
<body>
{{ body }}
</body>
</html>
""")


class AsciidocRenderer:
    """Runs the asciidoctor converter over the merged document."""

    def __init__(self, config: BuildConfig, workspace: Workspace):
        self.config = config
        self.workspace = workspace
        self.logger = logging.getLogger(__name__)

    def attributes(self) -> Dict[str, Any]:
        """Document attributes passed on the command line (True = set without value)."""
        return {
            'imagesdir': str(self.config.images_dir.resolve()),
            'data-uri': True,
            'stem': 'latexmath',
            'mathematical-format': 'svg',
            'mathematical-inline': 'svg',
            'source-highlighter': 'highlight.js',
            'icons': 'font',
            'sectlinks': True,
            'experimental': True,
            'listing-caption': self.config.listing_caption,
        }

    def build_command(self, source: Path) -> List[str]:
        cmd = [
            self.config.asciidoctor,
            '--safe-mode', 'safe',
            '--no-header-footer',
            '--base-dir', str(self.workspace.root.resolve()),
            '--out-file', '-',
        ]
        for name, value in self.attributes().items():
            cmd += ['-a', name if value is True else f"{name}={value}"]
        cmd.append(str(source))
        return cmd

    def render(self, merged_text: str) -> str:
        """
        Write the merged document to the workspace and convert it to HTML.

        Returns:
            Embeddable HTML body (no <html>/<head> wrapper)

        Raises:
            RenderError: If the converter is missing or exits with an error
        """
        source = self.workspace.write_text(self.config.merged_path, merged_text)

        if shutil.which(self.config.asciidoctor) is None:
            self.logger.error(f"AsciiDoc converter not found: {self.config.asciidoctor}")
            raise RenderError(f"AsciiDoc converter not found: {self.config.asciidoctor}",
                              path=str(source))

        self.logger.info(f"Images directory: {self.config.images_dir.resolve()}")
        self.logger.info("Converting AsciiDoc to HTML...")
        result = subprocess.run(
            self.build_command(source),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        for line in result.stderr.splitlines():
            if line.strip():
                self.logger.warning(f"asciidoctor: {line.strip()}")
        if result.returncode != 0:
            self.logger.error(f"asciidoctor exited with status {result.returncode}")
            raise RenderError(f"asciidoctor exited with status {result.returncode}", path=str(source))

        self.logger.info(f"Rendered {len(result.stdout):,} characters of HTML")
        return result.stdout


class PageShell:
    """Wraps rendered HTML in a page that declares math delimiters and loads MathJax."""

    def __init__(self, config: BuildConfig):
        self.config = config

    def wrap(self, body_html: str, title: str = None, extra_css: str = "") -> str:
        return _PAGE_TEMPLATE.render(
            body=body_html,
            title=title,
            mathjax_url=self.config.mathjax_url,
            extra_css=extra_css,
        )


def document_stats(html_content: str) -> Dict[str, Any]:
    """
    Summarize rendered HTML.

    Returns:
        Dictionary with title, word, image, math and listing counts
    """
    soup = BeautifulSoup(html_content, 'lxml')

    stats = {
        'title': '',
        'word_count': 0,
        'image_count': 0,
        'math_count': 0,
        'listing_count': 0,
    }

    heading = soup.find(['title', 'h1', 'h2'])
    if heading:
        stats['title'] = heading.get_text().strip()

    body = soup.find('body') or soup
    stats['word_count'] = len(body.get_text().split())
    stats['image_count'] = len(soup.find_all('img'))
    stats['math_count'] = len(soup.select('.stemblock')) + html_content.count('\\(')
    stats['listing_count'] = len(soup.select('.listingblock'))

    return stats
