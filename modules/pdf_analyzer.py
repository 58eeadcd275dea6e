"""Reads page count and page size from uploaded PDFs for the file preview."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Any

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from logging_config import get_logger


logger = get_logger(__name__)

POINTS_PER_MM = 72 / 25.4


class PDFAnalyzer:
    """Extract minimal metadata, resilient to malformed PDFs."""

    def analyze(self, pdf_path: str | Path) -> Dict[str, Any]:
        path = Path(pdf_path)
        info: Dict[str, Any] = {
            "path": str(path),
            "pages": 0,
            "size_kb": round(path.stat().st_size / 1024, 2) if path.exists() else 0,
            "width_mm": None,
            "height_mm": None,
        }

        try:
            reader = PdfReader(str(path))
            info["pages"] = len(reader.pages)
            if reader.pages:
                box = reader.pages[0].mediabox
                info["width_mm"] = round(float(box.width) / POINTS_PER_MM, 1)
                info["height_mm"] = round(float(box.height) / POINTS_PER_MM, 1)
        except (PyPdfError, OSError, ValueError) as exc:
            logger.warning(f"PDF analysis failed for {path.name}: {exc}")
            info["error"] = f"PDF analysis failed: {exc}"

        return info
