"""
Readiness gates for the browser engine.

MathJax typesets asynchronously after the page loads, and data-URI images
decode in the background. Capturing before either completes prints raw TeX
or blank figures, so the engine waits on both. Each wait is bounded and
reports a flag instead of raising.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from playwright.sync_api import Error as PlaywrightError


MATHJAX_AVAILABLE = "typeof MathJax !== 'undefined' && MathJax.typesetPromise !== undefined"

MATHJAX_TYPESET = """
(timeoutMs) => Promise.race([
    MathJax.typesetPromise().then(() => true),
    new Promise((resolve) => setTimeout(() => resolve(false), timeoutMs))
])
"""

IMAGES_SETTLED = """
(timeoutMs) => new Promise((resolve) => {
    const pending = Array.from(document.images).filter(img => !img.complete);
    const failed = [];
    if (pending.length === 0) {
        console.log('All images already loaded');
        resolve({ total: 0, settled: 0, failed, timedOut: false });
        return;
    }
    let settled = 0;
    const timer = setTimeout(() => {
        resolve({ total: pending.length, settled, failed, timedOut: true });
    }, timeoutMs);
    const imageSettled = () => {
        settled++;
        console.log(`Image loaded: ${settled}/${pending.length}`);
        if (settled === pending.length) {
            clearTimeout(timer);
            resolve({ total: pending.length, settled, failed, timedOut: false });
        }
    };
    pending.forEach(img => {
        img.addEventListener('load', imageSettled);
        img.addEventListener('error', () => {
            failed.push(img.src);
            imageSettled();
        });
    });
})
"""


@dataclass
class GateResult:
    ready: bool
    detail: str = ""
    failures: List[str] = field(default_factory=list)


@dataclass
class Readiness:
    math: GateResult
    images: GateResult

    @property
    def ready(self) -> bool:
        return self.math.ready and self.images.ready


def _short(src: str, limit: int = 80) -> str:
    return src if len(src) <= limit else src[:limit] + "..."


class ReadinessGate:
    def __init__(self, timeout: float = 30.0):
        """
        Args:
            timeout: Upper bound in seconds for each wait
        """
        self.timeout_ms = int(timeout * 1000)
        self.logger = logging.getLogger(__name__)

    def wait_for_math(self, page) -> GateResult:
        """Wait for MathJax to load, then for one full typeset pass."""
        self.logger.info("Waiting for MathJax...")
        try:
            page.wait_for_function(MATHJAX_AVAILABLE, timeout=self.timeout_ms)
        except PlaywrightError as e:
            self.logger.error(f"MathJax loading error: {e}")
            return GateResult(False, f"MathJax not available: {e}")

        try:
            finished = page.evaluate(MATHJAX_TYPESET, self.timeout_ms)
        except PlaywrightError as e:
            self.logger.error(f"MathJax typesetting error: {e}")
            return GateResult(False, f"Typesetting failed: {e}")

        if not finished:
            self.logger.error(f"MathJax typesetting did not finish within {self.timeout_ms} ms")
            return GateResult(False, "Typesetting timed out")
        return GateResult(True, "Typeset complete")

    def wait_for_images(self, page) -> GateResult:
        """Wait until every <img> has loaded or errored. Errored images are logged, not fatal."""
        self.logger.info("Waiting for images to load...")
        try:
            state = page.evaluate(IMAGES_SETTLED, self.timeout_ms)
        except PlaywrightError as e:
            self.logger.error(f"Image wait error: {e}")
            return GateResult(False, f"Image wait failed: {e}")

        failed = list(state.get('failed') or [])
        for src in failed:
            self.logger.error(f"Failed to load image: {_short(src)}")

        if state.get('timedOut'):
            self.logger.error(f"Images still loading after {self.timeout_ms} ms "
                              f"({state.get('settled')}/{state.get('total')} settled)")
            return GateResult(False, "Image loading timed out", failed)

        return GateResult(True, f"{state.get('total', 0)} pending images settled", failed)
