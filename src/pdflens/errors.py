from __future__ import annotations


class PdfLensError(Exception):
    """Base class for all pdflens errors."""


class EngineInitError(PdfLensError):
    """The rendering engine could not be initialized.

    Reported to the request that attempted initialization; the next request
    retries.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to initialize rendering engine: {reason}")
        self.reason = reason


class LoadError(PdfLensError):
    """A single document could not be opened."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to load PDF '{path}': {reason}")
        self.path = path
        self.reason = reason


class RenderError(PdfLensError):
    """A single page could not be rasterized."""

    def __init__(self, page: int, reason: str) -> None:
        super().__init__(f"Failed to render page {page}: {reason}")
        self.page = page
        self.reason = reason


class AnalyzerError(PdfLensError):
    """One analyzer failed on one file."""

    def __init__(self, analyzer: str, file: str, reason: str) -> None:
        super().__init__(f"Analyzer '{analyzer}' failed on '{file}': {reason}")
        self.analyzer = analyzer
        self.file = file
        self.reason = reason


class ConfigError(PdfLensError):
    """Settings could not be persisted or parsed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Config error: {reason}")
        self.reason = reason


class BrokerShutdownError(PdfLensError):
    """The resource broker stopped before the request was served."""

    def __init__(self) -> None:
        super().__init__("broker shutting down")
