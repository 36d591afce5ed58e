#!/usr/bin/env python3
"""
Command Palette - Demo Host
===========================

Wires the feature command factories into the palette core and drives it
from the terminal.

Usage:
    python main.py                      # Interactive text mode
    python main.py --query save         # One-shot search
    python main.py --key Ctrl+S         # One-shot shortcut dispatch
    python main.py --config palette.yaml --log-level DEBUG

Interactive input:
    >text       search
    !Ctrl+S     press a shortcut
    open | close | toggle
    keys        list effective shortcuts
    recent      list recently executed commands
    quit
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from commands.factories import (
    FileHandlers, ViewHandlers, ThemeHandlers, SessionHandlers,
    ToolsHandlers, SettingsHandlers, HelpHandlers, build_commands
)
from commands.matcher import SearchResult
from commands.registry import CommandRegistry
from core.errors import PaletteError
from core.palette import CommandPalette, DispatchResult, DispatchStatus
from core.visibility_bus import VisibilityBus
from infra.config import PaletteConfig, load_config
from infra.logging import configure_logging


# Setup rich console
console = Console()


class DemoApp:
    """Stand-in for the host application the factories bind to."""

    def __init__(self, out: Console):
        self.out = out
        self.connected = False
        self.palette_visible = False

    def say(self, message: str) -> None:
        self.out.print(f"[bold green]→[/bold green] {message}")

    def connect(self) -> None:
        self.connected = True
        self.say("Connected")

    def disconnect(self) -> None:
        self.connected = False
        self.say("Disconnected")

    def handler_records(self) -> list:
        return [
            FileHandlers(
                on_new_session=lambda: self.say("New session"),
                on_open_file=lambda: self.say("Open file"),
                on_save=lambda: self.say("Saved"),
                on_export_logs=lambda: self.say("Logs exported"),
            ),
            ViewHandlers(
                on_toggle_sidebar=lambda: self.say("Sidebar toggled"),
                on_toggle_inspector=lambda: self.say("Inspector toggled"),
                on_toggle_status_bar=lambda: self.say("Status bar toggled"),
                on_search=lambda: self.say("Search focused"),
                on_zoom_in=lambda: self.say("Zoomed in"),
                on_zoom_out=lambda: self.say("Zoomed out"),
                on_zoom_reset=lambda: self.say("Zoom reset"),
                on_fullscreen=lambda: self.say("Fullscreen toggled"),
            ),
            ThemeHandlers(on_set_theme=lambda mode: self.say(f"Theme: {mode}")),
            SessionHandlers(
                on_connect=self.connect,
                on_disconnect=self.disconnect,
                on_toggle_capture=lambda: self.say("Capture toggled"),
                on_edit_protocol=lambda: self.say("Editing protocol"),
                is_connected=lambda: self.connected,
            ),
            ToolsHandlers(
                on_open_toolbox=lambda: self.say("Toolbox opened"),
                on_open_tool=lambda tool_id: self.say(f"Tool opened: {tool_id}"),
            ),
            SettingsHandlers(
                on_open_settings=lambda section=None: self.say(
                    f"Settings: {section or 'general'}"
                ),
            ),
            HelpHandlers(
                on_open_user_guide=lambda: self.say("User guide"),
                on_open_keyboard_shortcuts=lambda: self.say("Keyboard shortcuts"),
                on_open_release_notes=lambda: self.say("Release notes"),
                on_report_issue=lambda: self.say("Report issue"),
                on_check_updates=lambda: self.say("Checking for updates"),
                on_about=lambda: self.say("Command palette demo"),
            ),
        ]


def build_demo_palette(
    config: Optional[PaletteConfig] = None,
    out: Optional[Console] = None,
) -> tuple:
    """Create an isolated palette loaded with the demo commands."""
    app = DemoApp(out or console)
    palette = CommandPalette(
        registry=CommandRegistry(),
        bus=VisibilityBus(),
        config=config or PaletteConfig(),
    )
    palette.register_many(build_commands(app.handler_records()))

    def _show() -> None:
        app.palette_visible = True

    def _hide() -> None:
        app.palette_visible = False

    def _flip() -> None:
        app.palette_visible = not app.palette_visible

    palette.bus.on("open", _show)
    palette.bus.on("close", _hide)
    palette.bus.on("toggle", _flip)
    return palette, app


def print_results(results: List[SearchResult]) -> None:
    """Render search results as a table."""
    if not results:
        console.print("[dim]No matching commands[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Command")
    table.add_column("Category", style="magenta")
    table.add_column("Shortcut", style="yellow")
    table.add_column("Score", justify="right", style="dim")

    for index, result in enumerate(results, start=1):
        command = result.command
        table.add_row(
            str(index),
            command.title,
            command.category.value,
            command.shortcut_text or "",
            f"{result.score:.1f}",
        )
    console.print(table)


def print_dispatch(result: Optional[DispatchResult]) -> None:
    if result is None:
        console.print("[dim]No command bound to that shortcut[/dim]")
    elif result.status is DispatchStatus.UNAVAILABLE:
        console.print(f"[yellow]{result.command.title} is not available right now[/yellow]")
    elif result.status is DispatchStatus.NEEDS_CONFIRMATION:
        console.print(f"[yellow]{result.command.title} needs confirmation[/yellow]")
    else:
        console.print(f"[dim]{result.command.id} ran in {result.execution_time_ms:.1f}ms[/dim]")


def confirm_and_run(palette: CommandPalette, result: Optional[DispatchResult]) -> None:
    """Ask before running a command that was held for confirmation."""
    if result is not None and result.status is DispatchStatus.NEEDS_CONFIRMATION:
        answer = console.input(f"Run [bold]{result.command.title}[/bold]? [y/N] ")
        if answer.strip().lower() in ("y", "yes"):
            result = palette.execute(result.command, confirmed=True)
    print_dispatch(result)


def print_bindings(palette: CommandPalette) -> None:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Shortcut", style="yellow")
    table.add_column("Command")
    for shortcut, command in palette.resolver.bindings():
        table.add_row(shortcut, command.title)
    console.print(table)


def run_text_mode(palette: CommandPalette, app: DemoApp) -> None:
    """Read commands from stdin until quit."""
    banner = Text()
    banner.append("Command Palette", style="bold cyan")
    banner.append(" - demo host\n\n", style="dim")
    banner.append(">text", style="bold green")
    banner.append(" search  ", style="dim")
    banner.append("!Ctrl+S", style="bold green")
    banner.append(" shortcut  ", style="dim")
    banner.append("open/close/toggle keys recent quit", style="bold green")
    console.print(Panel(banner, title="Welcome", border_style="blue"))

    last_results: List[SearchResult] = []

    while True:
        try:
            line = console.input("[bold blue]palette>[/bold blue] ").strip()
        except (EOFError, KeyboardInterrupt):
            break

        if not line:
            continue

        try:
            if line in ("quit", "exit"):
                break
            elif line in ("open", "close", "toggle"):
                palette.bus.emit(line)
                state = "visible" if app.palette_visible else "hidden"
                console.print(f"[dim]Palette is {state}[/dim]")
            elif line == "keys":
                print_bindings(palette)
            elif line == "recent":
                for command in palette.recent_commands():
                    console.print(f"  {command.title} [dim]({command.id})[/dim]")
            elif line.startswith(">"):
                last_results = palette.search(line[1:])
                print_results(last_results)
            elif line.startswith("!"):
                confirm_and_run(palette, palette.dispatch_shortcut(line[1:]))
            elif line.isdigit() and 0 < int(line) <= len(last_results):
                command = last_results[int(line) - 1].command
                confirm_and_run(palette, palette.execute(command))
            else:
                console.print("[dim]Unknown input. Use >query, !shortcut or a result number.[/dim]")
        except PaletteError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")

    console.print("\n[yellow]Shutting down...[/yellow]")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Command palette demo host")
    parser.add_argument("--config", help="Path to a palette YAML config file")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("--log-dir", help="Also write JSON logs to this directory")
    parser.add_argument("--query", help="Run one search and exit")
    parser.add_argument("--key", help="Dispatch one shortcut and exit")
    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except PaletteError as e:
        console.print(f"[bold red]Configuration error:[/bold red] {e}")
        return 2

    level = (args.log_level or config.log_level).upper()
    configure_logging(
        level=getattr(logging, level, logging.INFO),
        log_dir=args.log_dir,
        file=args.log_dir is not None,
        rich_console=console,
    )

    try:
        palette, app = build_demo_palette(config)
    except PaletteError as e:
        console.print(f"[bold red]Registration failed:[/bold red] {e}")
        return 1

    if args.query is not None:
        print_results(palette.search(args.query))
        return 0

    if args.key is not None:
        confirm_and_run(palette, palette.dispatch_shortcut(args.key))
        return 0

    run_text_mode(palette, app)
    return 0


if __name__ == "__main__":
    sys.exit(main())
