import io
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pypdf
from pypdf.errors import PyPdfError

logger = logging.getLogger(__name__)


class ExtractionError(RuntimeError):
    """Raised when the uploaded bytes cannot be read as a PDF."""


@dataclass
class ExtractedResume:
    raw_text: str
    pages: List[Dict[str, Any]] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def pdf_data(self) -> Dict[str, Any]:
        """Structured page data, JSON-serialisable."""
        return {
            "numPages": len(self.pages),
            "metadata": self.metadata,
            "pages": self.pages,
        }


def extract_resume(pdf_bytes: bytes) -> ExtractedResume:
    """Extract raw text and per-page data from PDF bytes.

    Blocking; call from a worker thread inside request handlers.
    """
    if not pdf_bytes:
        raise ExtractionError("Uploaded file is empty")
    try:
        reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
        pages = []
        for i, page in enumerate(reader.pages):
            box = page.mediabox
            pages.append({
                "index": i,
                "width": float(box.width),
                "height": float(box.height),
                "text": page.extract_text() or "",
            })
        meta = reader.metadata or {}
        metadata = {str(k).lstrip("/"): str(v) for k, v in meta.items()}
    except (PyPdfError, ValueError, KeyError, TypeError) as e:
        logger.error(f"PDF parsing failed: {e}")
        raise ExtractionError(str(e) or "Failed to parse PDF") from e

    raw_text = "\n".join(p["text"] for p in pages)
    return ExtractedResume(raw_text=raw_text, pages=pages, metadata=metadata)
