"""Inspection helpers for generated PDFs."""

from pathlib import Path
from typing import Optional, Tuple, Union

from pypdf import PdfReader
from pypdf.errors import PdfReadError


MM_PER_POINT = 25.4 / 72


def page_count(pdf_path: Union[str, Path]) -> Optional[int]:
    """Get page count from PDF, or None if unreadable."""
    try:
        reader = PdfReader(str(pdf_path))
        return len(reader.pages)
    except (OSError, PdfReadError):
        return None


def page_size_mm(pdf_path: Union[str, Path], index: int = 0) -> Tuple[float, float]:
    """Width and height of one page in millimetres."""
    page = PdfReader(str(pdf_path)).pages[index]
    return (float(page.mediabox.width) * MM_PER_POINT,
            float(page.mediabox.height) * MM_PER_POINT)
