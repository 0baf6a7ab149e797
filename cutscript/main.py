"""CLI entrypoint: evaluate an edit script and show the resulting timeline."""

import argparse
import dataclasses
import json
import sys
import time
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .debounce import Debouncer
from .errors import error_response
from .interpreter import Interpreter
from .media import FFprobeEngine
from .models import PassResult
from .pipeline import Pipeline
from .store import SegmentStore
from .timecode import format_timecode

_console = Console()


def _config_panel(result: PassResult) -> Panel:
    c = result.config
    return Panel.fit(
        f"[bold]Resolution:[/] {c.resolution} @ {c.frame_rate}fps\n"
        f"[bold]Font:[/]       {escape(c.default_font)} {c.default_font_size}pt\n"
        f"[bold]Colors:[/]     title {c.default_title_color}, subtitle {c.default_subtitle_color}, "
        f"background alpha {c.default_background_alpha}",
        title=f"[bold cyan]{escape(c.project_name)}[/]",
    )


def _segment_table(store: SegmentStore) -> Table:
    table = Table(title="Segments")
    table.add_column("id", justify="right")
    table.add_column("start")
    table.add_column("end")
    table.add_column("state")
    table.add_column("source")
    for segment in store:
        style = None if segment.visible else "dim"
        table.add_row(
            str(segment.id),
            format_timecode(segment.start),
            format_timecode(segment.end),
            segment.state.value,
            escape(segment.path),
            style=style,
        )
    return table


def _scene_table(result: PassResult) -> Table:
    table = Table(title="Scenes")
    table.add_column("line", justify="right")
    table.add_column("range")
    table.add_column("title")
    table.add_column("subtitle")
    for scene in result.scenes:
        table.add_row(
            str(scene.line),
            f"{format_timecode(scene.start)} → {format_timecode(scene.end)}",
            escape(scene.title or ""),
            escape((scene.subtitle or "").replace("\n", " / ")),
        )
    return table


def _as_json(result: PassResult, store: SegmentStore) -> str:
    errors = []
    if result.report is not None:
        errors = [
            error_response(r.error, context=f"line {r.command.line}")
            for r in result.report.results
            if not r.success and r.error is not None
        ]
    payload = {
        "config": dataclasses.asdict(result.config),
        "segments": [
            {
                "id": s.id,
                "start": s.start,
                "end": s.end,
                "visible": s.visible,
                "state": s.state.value,
                "path": s.path,
            }
            for s in store
        ],
        "scenes": [
            {
                "line": s.line,
                "start": s.start,
                "end": s.end,
                "title": s.title,
                "subtitle": s.subtitle,
                "content": s.content,
            }
            for s in result.scenes
        ],
        "executed": result.executed,
        "errors": errors,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def render(result: PassResult, store: SegmentStore, fmt: str = "table") -> None:
    if fmt == "json":
        _console.print_json(_as_json(result, store))
        return

    _console.print(_config_panel(result))
    _console.print(_segment_table(store))
    if result.scenes:
        _console.print(_scene_table(result))

    _console.print(
        f"[bold]Output duration:[/] {format_timecode(store.assembled_duration())} "
        f"({len(store.visible_segments())}/{len(store)} segments visible)"
    )
    if result.report is not None:
        for message in result.report.error_messages:
            _console.print(f"[yellow]![/] {escape(message)}")
    if not result.executed:
        _console.print("[dim]Commands unchanged, timeline kept.[/]")


def run(args: argparse.Namespace) -> None:
    script = Path(args.script)
    if not script.is_file():
        _console.print(f"[red]Error:[/] script not found: {script}")
        sys.exit(1)

    store = SegmentStore()
    engine = FFprobeEngine(base_dir=str(script.parent.resolve()))
    pipeline = Pipeline(Interpreter(store, engine))
    pipeline.on_error(lambda message: _console.print(f"[red]Error:[/] {escape(message)}"))

    if args.dump_commands:
        def dump(result: PassResult) -> None:
            for command in result.commands:
                _console.print(f"  [dim]{command.line:>4}[/]  {escape(str(command))}")

        pipeline.subscribe(dump)

    if not args.watch:
        text = script.read_text(encoding="utf-8")
        with _console.status("[cyan]Evaluating script...[/]"):
            result = pipeline.submit(text)
        if result is None:
            sys.exit(1)
        render(result, store, args.format)
        return

    pipeline.subscribe(lambda r: render(r, store, args.format))
    debouncer = Debouncer(pipeline.submit, quiet_ms=args.debounce_ms, on_push=pipeline.notify_changed)
    _console.print(f"[cyan]Watching {script}[/] (Ctrl-C to stop)")

    last_mtime = None
    try:
        while True:
            try:
                mtime = script.stat().st_mtime
            except FileNotFoundError:
                mtime = None
            if mtime is not None and mtime != last_mtime:
                last_mtime = mtime
                debouncer.push(script.read_text(encoding="utf-8"))
            time.sleep(args.poll)
    except KeyboardInterrupt:
        _console.print("\n[bold green]✓[/] Stopped watching")
    finally:
        debouncer.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="cutscript: compile a plain-text edit script into a video timeline"
    )
    parser.add_argument("script", help="Edit script (header, ===, then commands and scenes)")
    parser.add_argument("--watch", action="store_true", help="Re-evaluate whenever the script changes")
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=500,
        help="Quiet period before a change is evaluated in --watch mode (default: 500)",
    )
    parser.add_argument("--poll", type=float, default=0.25, help="File polling interval in seconds (default: 0.25)")
    parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format (default: table)")
    parser.add_argument("--dump-commands", action="store_true", help="Print the parsed commands on each pass")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    run(args)


if __name__ == "__main__":
    main()
