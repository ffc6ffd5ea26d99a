from __future__ import annotations

from pathlib import Path

from pdflens.contracts import Analyzer, LoadedDocument
from pdflens.models import PageCountResult


class PageCountAnalyzer(Analyzer):
    """Report the number of pages in the document."""

    @property
    def id(self) -> str:
        return "page_count"

    @property
    def name(self) -> str:
        return "Page Count"

    def analyze(self, document: LoadedDocument, path: Path) -> PageCountResult:
        return PageCountResult(total=document.page_count())
