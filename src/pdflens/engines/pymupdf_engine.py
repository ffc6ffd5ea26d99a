from __future__ import annotations

import logging
from typing import Any, cast

import fitz
import numpy as np
from numpy.typing import NDArray

from pdflens.contracts import RenderingEngine
from pdflens.errors import LoadError, RenderError

logger = logging.getLogger(__name__)


class PyMuPDFEngine(RenderingEngine):
    """RenderingEngine backed by PyMuPDF."""

    def __init__(self) -> None:
        # an empty in-memory document exercises the native library
        scratch = fitz.open()
        scratch.close()
        logger.debug("Initialized PyMuPDF %s.", fitz.VersionBind)

    def open(self, path: str) -> object:
        try:
            document = fitz.open(path)
        except Exception as exc:  # noqa: BLE001 - MuPDF raises several types
            raise LoadError(path, str(exc)) from exc
        if document.needs_pass:
            document.close()
            raise LoadError(path, "document is password protected")
        return document

    def page_count(self, document: object) -> int:
        return cast(fitz.Document, document).page_count

    def render_page(
        self, document: object, index: int, target_width: int, max_height: int
    ) -> NDArray[np.uint8]:
        doc = cast(fitz.Document, document)
        try:
            page = doc.load_page(index)
            rect = page.rect
            if rect.width <= 0 or rect.height <= 0:
                raise ValueError("page has an empty media box")
            zoom = min(target_width / rect.width, max_height / rect.height)
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
        except Exception as exc:  # noqa: BLE001
            raise RenderError(index, str(exc)) from exc

        img = np.frombuffer(cast(Any, pix.samples), dtype=np.uint8)
        return img.reshape(pix.height, pix.width, pix.n)

    def close(self, document: object) -> None:
        cast(fitz.Document, document).close()
