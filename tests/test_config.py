from __future__ import annotations

import pytest

from pdflens.config import (
    Config,
    ConfigParam,
    InMemoryConfigStore,
    as_bool,
    as_float,
    as_int,
    as_str,
    parse_config_value,
)


def test_get_and_set_values_by_module() -> None:
    config = Config()
    config.set_analyzer_value("color_analysis", "tolerance", 12)
    config.set_output_value("cost", "cost_bw", 0.1)

    assert config.get_analyzer_value("color_analysis", "tolerance") == 12
    assert config.get_output_value("cost", "cost_bw") == 0.1
    assert config.get_output_value("color_analysis", "tolerance") is None
    assert config.get_analyzer_value("missing", "key") is None


def test_values_keep_their_types_through_validation() -> None:
    config = Config.model_validate(
        {"outputs": {"cost": {"a": True, "b": 3, "c": 0.5, "d": "eur"}}}
    )

    values = config.outputs["cost"]
    assert values["a"] is True
    assert isinstance(values["b"], int) and not isinstance(values["b"], bool)
    assert isinstance(values["c"], float)
    assert values["d"] == "eur"


def test_snapshot_is_independent() -> None:
    config = Config()
    config.set_output_value("cost", "cost_bw", 0.1)

    snapshot = config.snapshot()
    config.set_output_value("cost", "cost_bw", 0.9)

    assert snapshot.get_output_value("cost", "cost_bw") == 0.1


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, True), (1, None), ("true", None), (None, None)],
)
def test_as_bool(value: object, expected: object) -> None:
    assert as_bool(value) == expected  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 0.5), (2, 2.0), (True, None), ("0.5", None), (None, None)],
)
def test_as_float(value: object, expected: object) -> None:
    assert as_float(value) == expected  # type: ignore[arg-type]


def test_as_int_and_as_str() -> None:
    assert as_int(3) == 3
    assert as_int(False) is None
    assert as_int(3.0) is None
    assert as_str("x") == "x"
    assert as_str(1) is None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("true", True),
        ("Off", False),
        ("12", 12),
        ("0.25", 0.25),
        ("A4", "A4"),
    ],
)
def test_parse_config_value(text: str, expected: object) -> None:
    parsed = parse_config_value(text)

    assert parsed == expected
    assert type(parsed) is type(expected)


def test_in_memory_store_round_trip() -> None:
    store = InMemoryConfigStore()
    config = store.load()
    config.set_output_value("summary", "show_per_file", False)

    assert store.load().get_output_value("summary", "show_per_file") is None
    store.save(config)
    config.set_output_value("summary", "show_per_file", True)

    assert store.load().get_output_value("summary", "show_per_file") is False


def test_config_param_is_frozen() -> None:
    param = ConfigParam(key="k", label="K", default=1, description="d")

    with pytest.raises(Exception):
        param.key = "other"  # type: ignore[misc]


def test_config_param_accepts_values_of_its_default_type() -> None:
    tolerance = ConfigParam(key="tolerance", label="T", default=10, description="d")
    rate = ConfigParam(key="rate", label="R", default=0.05, description="d")
    toggle = ConfigParam(key="on", label="O", default=True, description="d")

    assert tolerance.accepts(3) is True
    assert tolerance.accepts("abc") is False
    assert tolerance.accepts(True) is False
    assert rate.accepts(1) is True
    assert rate.accepts(False) is False
    assert toggle.accepts(False) is True
    assert toggle.accepts(1) is False
