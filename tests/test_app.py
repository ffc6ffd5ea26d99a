from __future__ import annotations

import threading
import time
from collections.abc import Iterator

import pytest

from fakes import FakeEngine, make_pages
from pdflens.app import App
from pdflens.broker import ResourceBroker
from pdflens.config import Config, InMemoryConfigStore
from pdflens.contracts import ConfigStore
from pdflens.errors import ConfigError
from pdflens.outputs import CostOutput
from pdflens.session import SessionState


class FailingStore(ConfigStore):
    def load(self) -> Config:
        return Config()

    def save(self, config: Config) -> None:
        raise ConfigError("disk full")


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine(
        {
            "/docs/a.pdf": make_pages(bw=10, color=2),
            "/docs/b.pdf": make_pages(bw=5, color=0),
            "/docs/c.pdf": make_pages(bw=2, color=1),
        }
    )


@pytest.fixture
def broker(engine: FakeEngine) -> Iterator[ResourceBroker]:
    instance = ResourceBroker(lambda: engine)
    yield instance
    instance.shutdown()


def _drive(app: App, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while app.state is SessionState.RUNNING:
        assert time.monotonic() < deadline, "analysis did not finish"
        app.update()
        time.sleep(0.01)
    app.update()


def _cost(app: App) -> CostOutput:
    output = app.output_registry.outputs[1]
    assert isinstance(output, CostOutput)
    return output


def test_add_and_remove_documents(broker: ResourceBroker) -> None:
    app = App(broker=broker)

    info = app.add_document("/docs/a.pdf")
    app.add_document("/docs/b.pdf")
    app.remove_document(0)
    app.remove_document(7)

    assert info is not None and info.page_count == 12
    assert [document.filename for document in app.documents] == ["b.pdf"]


def test_add_document_failure_is_reported(broker: ResourceBroker) -> None:
    app = App(broker=broker)

    assert app.add_document("/docs/missing.pdf") is None
    assert app.documents == []
    assert app.latest_error is not None
    assert "missing.pdf" in app.latest_error

    app.dismiss_error()
    assert app.latest_error is None


def test_full_analysis_produces_outputs(broker: ResourceBroker) -> None:
    app = App(broker=broker)
    for path in ("/docs/a.pdf", "/docs/b.pdf", "/docs/c.pdf"):
        app.add_document(path)

    assert app.start_analysis() is True
    _drive(app)

    assert app.state is SessionState.COMPLETED
    assert [result.filename for result in app.results] == ["a.pdf", "b.pdf", "c.pdf"]
    assert [output.title for output in app.outputs] == [
        "Page Summary",
        "Cost Calculation",
    ]
    assert dict(app.outputs[1].totals)["Grand Total"] == "1.30"
    assert app.progress is not None
    assert app.progress.files_total == 3


def test_start_without_documents_is_rejected(broker: ResourceBroker) -> None:
    app = App(broker=broker)

    assert app.start_analysis() is False
    assert app.state is SessionState.IDLE


def test_failed_file_surfaces_error_but_others_complete(
    broker: ResourceBroker,
) -> None:
    app = App(broker=broker)

    app.start_analysis(["/docs/a.pdf", "/docs/gone.pdf"])
    _drive(app)

    assert len(app.results) == 2
    assert app.results[1].results == []
    assert app.latest_error is not None
    assert app.latest_error.startswith("Failed to analyze gone.pdf")
    assert dict(app.outputs[0].totals)["Total Pages"] == "12"


def test_config_from_store_is_applied_at_startup(broker: ResourceBroker) -> None:
    store = InMemoryConfigStore(Config(outputs={"cost": {"cost_bw": 0.1}}))

    app = App(broker=broker, store=store)

    assert _cost(app).cost_bw == 0.1


def test_save_config_failure_keeps_in_memory_settings(
    broker: ResourceBroker,
) -> None:
    app = App(broker=broker, store=FailingStore())
    app.config.set_output_value("cost", "cost_color", 0.5)

    app.save_config()

    assert app.errors == ["Failed to save config: disk full"]
    assert _cost(app).cost_color == 0.5


def test_save_config_during_run_waits_for_completion() -> None:
    gate = threading.Event()
    engine = FakeEngine({"/docs/a.pdf": make_pages(1, 1)}, gate=gate)
    broker = ResourceBroker(lambda: engine)
    try:
        app = App(broker=broker)
        assert app.start_analysis(["/docs/a.pdf"])
        app.config.set_output_value("cost", "cost_color", 1.0)
        app.save_config()
        assert _cost(app).cost_color == 0.15
        gate.set()
        _drive(app)
    finally:
        gate.set()
        broker.shutdown()

    assert _cost(app).cost_color == 1.0
    assert dict(app.outputs[1].totals)["Total Color Cost"] == "1.00"


def test_regenerate_outputs_after_settings_change(broker: ResourceBroker) -> None:
    app = App(broker=broker)
    app.start_analysis(["/docs/b.pdf"])
    _drive(app)

    app.config.set_output_value("cost", "cost_bw", 1.0)
    app.save_config()
    app.regenerate_outputs()

    assert dict(app.outputs[1].totals)["Grand Total"] == "5.00"


def test_clear_resets_state(broker: ResourceBroker) -> None:
    app = App(broker=broker)
    app.add_document("/docs/a.pdf")
    app.add_document("/docs/missing.pdf")
    app.start_analysis()
    _drive(app)

    app.clear()

    assert app.documents == []
    assert app.results == []
    assert app.outputs == []
    assert app.errors == []
    assert app.progress is None
    assert app.state is SessionState.IDLE
