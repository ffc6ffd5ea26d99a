from __future__ import annotations

import enum
import logging
import queue
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from pdflens.broker import ResourceBroker, filename_of
from pdflens.contracts import Analyzer
from pdflens.models import (
    CompletedEvent,
    ErrorEvent,
    PerFileAnalysis,
    ProgressEvent,
    ProgressSnapshot,
    SessionEvent,
)

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


class AnalysisSession:
    """Drive one batch analysis at a time on a background thread.

    Every document operation goes through *broker*; this class never touches
    the rendering engine. Events are consumed with :meth:`poll`, which never
    blocks.
    """

    def __init__(self, broker: ResourceBroker) -> None:
        self._broker = broker
        self._lock = threading.Lock()
        self._state = SessionState.IDLE
        self._events: queue.Queue[SessionEvent] | None = None
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is SessionState.RUNNING

    def start(
        self, paths: Sequence[str | Path], analyzers: Sequence[Analyzer]
    ) -> bool:
        """Begin analyzing *paths* with *analyzers*.

        Returns False without side effects when *paths* is empty or a
        session is already running. *analyzers* must not be reconfigured
        until the session completes.
        """
        batch = [str(path) for path in paths]
        if not batch:
            return False
        with self._lock:
            if self._state is SessionState.RUNNING:
                logger.info("Analysis already running; start request ignored.")
                return False
            events: queue.Queue[SessionEvent] = queue.Queue()
            thread = threading.Thread(
                target=self._run,
                args=(batch, tuple(analyzers), events),
                name="pdflens-session",
                daemon=True,
            )
            self._events = events
            self._thread = thread
            self._state = SessionState.RUNNING
        logger.info("Starting analysis of %d file(s).", len(batch))
        thread.start()
        return True

    def poll(self) -> list[SessionEvent]:
        """Drain and return every event queued so far, in production order."""
        with self._lock:
            events = self._events
        drained: list[SessionEvent] = []
        if events is None:
            return drained
        while True:
            try:
                drained.append(events.get_nowait())
            except queue.Empty:
                return drained

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the current session thread ends; True if it did."""
        with self._lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def clear(self) -> None:
        """Stop observing the current session and return to IDLE.

        Work already handed to the broker still runs; its events are dropped.
        """
        with self._lock:
            self._events = None
            self._thread = None
            self._state = SessionState.IDLE

    def _run(
        self,
        paths: list[str],
        analyzers: tuple[Analyzer, ...],
        events: queue.Queue[SessionEvent],
    ) -> None:
        total = len(paths)
        results: list[PerFileAnalysis] = []

        for files_done, path in enumerate(paths):
            filename = filename_of(path)
            report = _progress_reporter(events, filename, files_done, total)
            try:
                analysis = self._broker.analyze(path, analyzers, on_analyzer=report)
            except BaseException as exc:  # noqa: BLE001 - isolate per-file failures
                logger.warning("Skipping %s: %s", path, exc)
                events.put(ErrorEvent(message=f"Failed to analyze {filename}: {exc}"))
                analysis = PerFileAnalysis(
                    filename=filename, path=path, results=[], errors=[str(exc)]
                )
            results.append(analysis)

        logger.info("Analysis finished: %d file(s).", total)
        events.put(CompletedEvent(results=results))
        with self._lock:
            if self._events is events:
                self._state = SessionState.COMPLETED


def _progress_reporter(
    events: queue.Queue[SessionEvent], filename: str, files_done: int, total: int
) -> Callable[[str], None]:
    def report(analyzer_name: str) -> None:
        events.put(
            ProgressEvent(
                snapshot=ProgressSnapshot(
                    current_file=filename,
                    current_analyzer=analyzer_name,
                    files_done=files_done,
                    files_total=total,
                )
            )
        )

    return report
