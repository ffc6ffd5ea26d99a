from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from pdflens.analyzers import AnalyzerRegistry
from pdflens.broker import ResourceBroker, get_broker
from pdflens.config import Config, InMemoryConfigStore
from pdflens.contracts import ConfigStore
from pdflens.errors import ConfigError, PdfLensError
from pdflens.models import (
    CompletedEvent,
    DocumentInfo,
    ErrorEvent,
    OutputData,
    PerFileAnalysis,
    ProgressEvent,
    ProgressSnapshot,
)
from pdflens.outputs import OutputRegistry
from pdflens.session import AnalysisSession, SessionState

logger = logging.getLogger(__name__)


class App:
    """State a front end needs: documents, a session, its results and errors.

    Front ends call :meth:`update` once per tick; nothing here blocks on
    document work except :meth:`add_document`.
    """

    def __init__(
        self,
        broker: ResourceBroker | None = None,
        store: ConfigStore | None = None,
        analyzer_registry: AnalyzerRegistry | None = None,
        output_registry: OutputRegistry | None = None,
    ) -> None:
        self.broker = broker or get_broker()
        self.store = store or InMemoryConfigStore()
        self.config: Config = self.store.load()
        self.analyzer_registry = analyzer_registry or AnalyzerRegistry.default()
        self.output_registry = output_registry or OutputRegistry.default()
        self.session = AnalysisSession(self.broker)
        self.documents: list[DocumentInfo] = []
        self.progress: ProgressSnapshot | None = None
        self.results: list[PerFileAnalysis] = []
        self.outputs: list[OutputData] = []
        self.errors: list[str] = []
        self._reconfigure_pending = False

        self.analyzer_registry.apply_config(self.config)
        self.output_registry.apply_config(self.config)

    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def latest_error(self) -> str | None:
        return self.errors[-1] if self.errors else None

    def dismiss_error(self) -> None:
        if self.errors:
            self.errors.pop()

    def add_document(self, path: str | Path) -> DocumentInfo | None:
        try:
            info = self.broker.describe(path)
        except PdfLensError as exc:
            logger.warning("Could not add %s: %s", path, exc)
            self.errors.append(str(exc))
            return None
        self.documents.append(info)
        return info

    def remove_document(self, index: int) -> None:
        if 0 <= index < len(self.documents):
            del self.documents[index]

    def start_analysis(self, paths: Sequence[str | Path] | None = None) -> bool:
        """Analyze *paths*, or every added document when omitted."""
        if self.session.is_running:
            return False
        self._apply_config()
        if paths is None:
            paths = [document.path for document in self.documents]
        started = self.session.start(paths, self.analyzer_registry.analyzers)
        if started:
            self.results = []
            self.outputs = []
            self.progress = ProgressSnapshot(
                current_file="",
                current_analyzer="",
                files_done=0,
                files_total=len(paths),
            )
        return started

    def update(self) -> None:
        """Consume pending session events without blocking."""
        for event in self.session.poll():
            if isinstance(event, ProgressEvent):
                self.progress = event.snapshot
            elif isinstance(event, ErrorEvent):
                self.errors.append(event.message)
            elif isinstance(event, CompletedEvent):
                self.results = list(event.results)
                if self._reconfigure_pending:
                    self._apply_config()
                self.outputs = self.output_registry.generate_all(self.results)

    def save_config(self) -> None:
        """Persist settings and apply them.

        The in-memory settings stay authoritative when saving fails. While a
        session runs, applying waits until it completes.
        """
        try:
            self.store.save(self.config)
        except ConfigError as exc:
            logger.error("Failed to save config: %s", exc)
            self.errors.append(f"Failed to save config: {exc.reason}")
        if self.session.is_running:
            self._reconfigure_pending = True
        else:
            self._apply_config()

    def regenerate_outputs(self) -> None:
        self.outputs = self.output_registry.generate_all(self.results)

    def clear(self) -> None:
        self.session.clear()
        self.documents.clear()
        self.results.clear()
        self.outputs.clear()
        self.errors.clear()
        self.progress = None
        if self._reconfigure_pending:
            self._apply_config()

    def _apply_config(self) -> None:
        self.analyzer_registry.apply_config(self.config)
        self.output_registry.apply_config(self.config)
        self._reconfigure_pending = False
