from __future__ import annotations

import argparse
import logging
import time
from collections.abc import Sequence

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from pdflens.analyzers import AnalyzerRegistry
from pdflens.app import App
from pdflens.broker import ResourceBroker
from pdflens.config import Config, parse_config_value
from pdflens.outputs import OutputRegistry
from pdflens.reporters import RichReporter
from pdflens.session import SessionState

_POLL_INTERVAL = 0.05


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pdflens", description="pdflens CLI")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show informational logs"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    analyze = subparsers.add_parser(
        "analyze", help="Analyze one or more PDF files"
    )
    analyze.add_argument("files", nargs="+", help="PDF files to analyze")
    analyze.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="MODULE.KEY=VALUE",
        help="Override a setting, e.g. cost.cost_color=0.2 (repeatable)",
    )
    analyze.add_argument(
        "--export",
        action="store_true",
        help="Print the plain-text export of every report",
    )
    subparsers.add_parser("params", help="List configurable settings")
    return parser


def _apply_overrides(
    config: Config,
    overrides: Sequence[str],
    analyzers: AnalyzerRegistry,
    outputs: OutputRegistry,
) -> list[str]:
    """Write ``module.key=value`` overrides into *config*.

    Returns a warning for each override skipped because its key is not
    declared or its value has the wrong type. Raises ValueError for
    malformed overrides or unknown modules.
    """
    analyzer_params = {
        analyzer.id: analyzer.config_params() for analyzer in analyzers.analyzers
    }
    output_params = {output.id: output.config_params() for output in outputs.outputs}
    warnings: list[str] = []
    for override in overrides:
        target, sep, raw = override.partition("=")
        module_id, dot, key = target.partition(".")
        if not sep or not dot or not module_id or not key:
            raise ValueError(f"Invalid override {override!r}; use MODULE.KEY=VALUE.")
        if module_id in analyzer_params:
            params = analyzer_params[module_id]
        elif module_id in output_params:
            params = output_params[module_id]
        else:
            raise ValueError(f"Unknown module {module_id!r} in override {override!r}.")

        param = next((p for p in params if p.key == key), None)
        value = parse_config_value(raw)
        if param is None:
            warnings.append(f"Ignoring {target}: {module_id} has no setting {key!r}.")
            continue
        if not param.accepts(value):
            expected = type(param.default).__name__
            warnings.append(f"Ignoring {target}={raw}: expected {expected}.")
            continue
        if module_id in analyzer_params:
            config.set_analyzer_value(module_id, key, value)
        else:
            config.set_output_value(module_id, key, value)
    return warnings


def _render_params(
    console: Console, analyzers: AnalyzerRegistry, outputs: OutputRegistry
) -> None:
    table = Table(title="Settings")
    table.add_column("Setting", style="bold")
    table.add_column("Default")
    table.add_column("Description")
    sections = analyzers.all_config_params() + outputs.all_config_params()
    for module_id, _name, params in sections:
        for param in params:
            table.add_row(
                f"{module_id}.{param.key}", str(param.default), param.description
            )
    console.print(table)


def _wait_for_session(app: App, console: Console) -> None:
    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    ) as progress:
        total = app.progress.files_total if app.progress else 0
        task = progress.add_task("Analyzing", total=total)
        while True:
            running = app.state is SessionState.RUNNING
            app.update()
            if app.progress is not None and app.progress.current_file:
                progress.update(
                    task,
                    completed=app.progress.files_done,
                    description=(
                        f"{app.progress.current_file} - "
                        f"{app.progress.current_analyzer}"
                    ),
                )
            if not running:
                break
            time.sleep(_POLL_INTERVAL)
        progress.update(task, completed=total)


def _run_analyze(
    args: argparse.Namespace, *, console: Console, broker: ResourceBroker | None
) -> int:
    app = App(broker=broker)
    try:
        warnings = _apply_overrides(
            app.config, args.overrides, app.analyzer_registry, app.output_registry
        )
    except ValueError as exc:
        console.print(str(exc), markup=False)
        return 2
    for warning in warnings:
        console.print(f"Warning: {warning}", markup=False, style="yellow")
    app.save_config()

    if not app.start_analysis(args.files):
        console.print("Nothing to analyze.")
        return 2
    _wait_for_session(app, console)

    RichReporter(console).render(app.outputs, app.results)
    if args.export:
        for output in app.outputs:
            console.print()
            console.out(output.to_text(), highlight=False, end="")

    if app.results and all(not result.results for result in app.results):
        console.print("Analysis failed: no file could be analyzed.")
        return 1
    return 0


def run_cli(
    argv: Sequence[str] | None = None,
    *,
    console: Console | None = None,
    broker: ResourceBroker | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.getLogger().setLevel(logging.INFO if args.verbose else logging.ERROR)
    out_console = console or Console()
    if args.command == "analyze":
        return _run_analyze(args, console=out_console, broker=broker)
    if args.command == "params":
        _render_params(
            out_console, AnalyzerRegistry.default(), OutputRegistry.default()
        )
        return 0
    parser.error("Unknown command.")
    return 2


def main() -> None:
    raise SystemExit(run_cli())
