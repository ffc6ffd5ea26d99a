from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterator, Sequence
from concurrent.futures import Future
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar, cast

from pdflens.contracts import Analyzer, LoadedDocument, RenderingEngine
from pdflens.errors import BrokerShutdownError, EngineInitError, RenderError
from pdflens.models import AnalysisResult, DocumentInfo, PerFileAnalysis

logger = logging.getLogger(__name__)

R = TypeVar("R")

EngineFactory = Callable[[], RenderingEngine]

THUMBNAIL_WIDTH = 150
THUMBNAIL_MAX_HEIGHT = 200

_SHUTDOWN = object()


@dataclass
class _Request:
    job: Callable[[RenderingEngine], Any]
    reply: Future[Any]


def filename_of(path: str | Path) -> str:
    return Path(path).name or "Unknown"


class ResourceBroker:
    """Serialize every use of a single rendering engine through one thread.

    Callers on any thread submit jobs; the worker runs them one at a time
    and answers each through its own :class:`~concurrent.futures.Future`.
    The engine is created lazily on the worker by *engine_factory*. If that
    fails the request gets an :class:`EngineInitError` and the next request
    tries again.
    """

    def __init__(
        self, engine_factory: EngineFactory, *, name: str = "pdflens-broker"
    ) -> None:
        self._engine_factory = engine_factory
        self._engine: RenderingEngine | None = None
        self._queue: queue.Queue[object] = queue.Queue()
        self._closing = threading.Event()
        self._submit_lock = threading.Lock()
        self._thread = threading.Thread(target=self._worker, name=name, daemon=True)
        self._thread.start()

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive() and not self._closing.is_set()

    def submit(self, job: Callable[[RenderingEngine], R]) -> Future[R]:
        """Queue *job* and return the future that receives its outcome."""
        if threading.current_thread() is self._thread:
            raise RuntimeError("Broker jobs must not submit to their own broker.")
        reply: Future[R] = Future()
        with self._submit_lock:
            if self._closing.is_set():
                reply.set_exception(BrokerShutdownError())
                return reply
            self._queue.put(_Request(job=job, reply=reply))
        return reply

    def call(self, job: Callable[[RenderingEngine], R]) -> R:
        """Run *job* on the worker and block until it finishes."""
        return self.submit(job).result()

    def describe(self, path: str | Path) -> DocumentInfo:
        """Return page count and thumbnail for *path*.

        Raises ``LoadError`` if the document cannot be opened.
        """
        return self.call(lambda engine: _describe(engine, str(path)))

    def analyze(
        self,
        path: str | Path,
        analyzers: Sequence[Analyzer],
        on_analyzer: Callable[[str], None] | None = None,
    ) -> PerFileAnalysis:
        """Open *path* once and run *analyzers* against it in order.

        *on_analyzer* is called with each analyzer's name just before it
        runs; it executes on the broker thread and must not block.
        """
        snapshot = tuple(analyzers)
        return self.call(
            lambda engine: _run_analyzers(engine, str(path), snapshot, on_analyzer)
        )

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker; pending and in-flight requests fail."""
        with self._submit_lock:
            if not self._closing.is_set():
                self._closing.set()
                self._queue.put(_SHUTDOWN)
        if wait and threading.current_thread() is not self._thread:
            self._thread.join()

    def _worker(self) -> None:
        while True:
            item = self._queue.get()
            if item is _SHUTDOWN:
                break
            request = cast(_Request, item)
            if self._closing.is_set():
                request.reply.set_exception(BrokerShutdownError())
                continue
            self._serve(request)
        self._engine = None
        logger.debug("Broker worker stopped.")

    def _serve(self, request: _Request) -> None:
        if not request.reply.set_running_or_notify_cancel():
            return
        try:
            result = request.job(self._ensure_engine())
        except BaseException as exc:  # noqa: BLE001 - handed to the caller
            request.reply.set_exception(exc)
            return
        if self._closing.is_set():
            request.reply.set_exception(BrokerShutdownError())
        else:
            request.reply.set_result(result)

    def _ensure_engine(self) -> RenderingEngine:
        if self._engine is None:
            try:
                self._engine = self._engine_factory()
            except EngineInitError:
                raise
            except Exception as exc:  # noqa: BLE001
                logger.error("Rendering engine failed to initialize: %s", exc)
                raise EngineInitError(str(exc)) from exc
            logger.info("Rendering engine initialized.")
        return self._engine


@contextmanager
def _opened(engine: RenderingEngine, path: str) -> Iterator[LoadedDocument]:
    handle = engine.open(path)
    try:
        yield LoadedDocument(engine=engine, handle=handle, path=path)
    finally:
        try:
            engine.close(handle)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to close %s: %s", path, exc)


def _describe(engine: RenderingEngine, path: str) -> DocumentInfo:
    with _opened(engine, path) as document:
        page_count = document.page_count()
        thumbnail = None
        if page_count > 0:
            try:
                thumbnail = document.render_page(
                    0, THUMBNAIL_WIDTH, THUMBNAIL_MAX_HEIGHT
                )
            except RenderError as exc:
                logger.warning("No thumbnail for %s: %s", path, exc)
    return DocumentInfo(
        path=path,
        filename=filename_of(path),
        page_count=page_count,
        thumbnail=thumbnail,
    )


def _run_analyzers(
    engine: RenderingEngine,
    path: str,
    analyzers: Sequence[Analyzer],
    on_analyzer: Callable[[str], None] | None,
) -> PerFileAnalysis:
    results: list[AnalysisResult] = []
    errors: list[str] = []
    with _opened(engine, path) as document:
        for analyzer in analyzers:
            if on_analyzer is not None:
                on_analyzer(analyzer.name)
            try:
                result = analyzer.analyze(document, Path(path))
                if not isinstance(result, AnalysisResult):
                    raise TypeError(
                        f"returned {type(result).__name__}, not an AnalysisResult"
                    )
                results.append(result)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Analyzer %s failed on %s: %s", analyzer.id, path, exc)
                errors.append(f"{analyzer.name}: {exc}")
    return PerFileAnalysis(
        filename=filename_of(path), path=path, results=results, errors=errors
    )


_default_broker: ResourceBroker | None = None
_default_lock = threading.Lock()


def get_broker() -> ResourceBroker:
    """Return the process-wide broker, creating it on first use."""
    global _default_broker
    with _default_lock:
        if _default_broker is None:
            from pdflens.engines import PyMuPDFEngine

            _default_broker = ResourceBroker(PyMuPDFEngine)
        return _default_broker


def reset_broker() -> None:
    """Shut down the process-wide broker, if one was created."""
    global _default_broker
    with _default_lock:
        if _default_broker is not None:
            _default_broker.shutdown()
            _default_broker = None
