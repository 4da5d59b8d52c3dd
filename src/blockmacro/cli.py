"""CLI entry point: compile, explain, run, stop, mouse, blocks, toolbox."""

import json
import logging
import time
from pathlib import Path
from typing import Optional

import typer

from blockmacro import __version__
from blockmacro.commands import Command, Program, Repeat
from blockmacro.compiler import compile_workspace
from blockmacro.config import Settings, load_settings
from blockmacro.converters import default_registry
from blockmacro.errors import BlockMacroError, TransportError
from blockmacro.toolbox import load_toolbox, toolbox_xml
from blockmacro.transport import AgentClient
from blockmacro.workspace import load_workspace_file

app = typer.Typer(
    name="blockmacro",
    help="Compile block workspaces into macro programs and send them to the macro agent.",
)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj if isinstance(ctx.obj, Settings) else Settings()


def _compile_file(path: Path, ordered: bool = True) -> Program:
    if not path.exists():
        typer.echo(f"Error: file not found: {path}", err=True)
        raise typer.Exit(1)
    try:
        workspace = load_workspace_file(path)
    except BlockMacroError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    return compile_workspace(workspace, default_registry(), ordered=ordered)


def _client(ctx: typer.Context, agent_url: Optional[str]) -> AgentClient:
    settings = _settings(ctx)
    return AgentClient(agent_url or settings.agent_url, timeout=settings.timeout)


def _explain_lines(steps: tuple[Command, ...], depth: int = 1) -> list[str]:
    lines = []
    for step in steps:
        payload = {k: v for k, v in step.payload().items() if k != "steps"}
        args = " ".join(f"{k}={json.dumps(v, ensure_ascii=False)}" for k, v in payload.items())
        lines.append(f"{'  ' * depth}- {step.type}" + (f" {args}" if args else ""))
        if isinstance(step, Repeat):
            lines.extend(_explain_lines(step.steps, depth + 2))
    return lines


@app.command("compile")
def compile_cmd(
    file: Path = typer.Argument(..., help="Workspace .json file"),
    compact: bool = typer.Option(False, "--compact", help="Single-line JSON"),
    unordered: bool = typer.Option(False, "--unordered", help="Keep top blocks in file order, not layout order"),
):
    """Emit the compiled program JSON to stdout."""
    program = _compile_file(file, ordered=not unordered)
    typer.echo(program.to_json(indent=None if compact else 2))


@app.command("explain")
def explain_cmd(file: Path = typer.Argument(..., help="Workspace .json file")):
    """Print the compiled steps in readable form."""
    program = _compile_file(file)
    typer.echo("Steps:")
    for line in _explain_lines(program.steps):
        typer.echo(line)


@app.command("run")
def run_cmd(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Workspace .json file"),
    agent_url: Optional[str] = typer.Option(None, "--agent-url", help="Macro agent base URL"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compile only, do not send"),
    hold: bool = typer.Option(False, "--hold", help="Stay attached; Ctrl+C sends stop"),
):
    """Compile the workspace and send it to the macro agent."""
    program = _compile_file(file)
    if dry_run:
        typer.echo(f"Compiled {len(program)} steps. (dry run)")
        return
    with _client(ctx, agent_url) as client:
        status = client.submit_run(program)
        typer.echo(status.message, err=not status.ok)
        if not status.ok:
            raise typer.Exit(1)
        if hold:
            typer.echo("Press Ctrl+C to stop the macro.")
            try:
                while True:
                    time.sleep(0.2)
            except KeyboardInterrupt:
                stop = client.submit_stop()
                typer.echo(stop.message, err=not stop.ok)
                if not stop.ok:
                    raise typer.Exit(1)


@app.command("stop")
def stop_cmd(
    ctx: typer.Context,
    agent_url: Optional[str] = typer.Option(None, "--agent-url", help="Macro agent base URL"),
):
    """Ask the macro agent to stop the running macro."""
    with _client(ctx, agent_url) as client:
        status = client.submit_stop()
    typer.echo(status.message, err=not status.ok)
    if not status.ok:
        raise typer.Exit(1)


@app.command("mouse")
def mouse_cmd(
    ctx: typer.Context,
    agent_url: Optional[str] = typer.Option(None, "--agent-url", help="Macro agent base URL"),
):
    """Print the pointer position reported by the agent (handy for move-to blocks)."""
    try:
        with _client(ctx, agent_url) as client:
            x, y = client.mouse_position()
    except TransportError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    typer.echo(f"{x} {y}")


@app.command("blocks")
def blocks_cmd():
    """List the block types the compiler understands."""
    registry = default_registry()
    for definition in registry.definitions():
        names = ", ".join(f.name for f in definition.fields)
        typer.echo(f"{definition.type:<22} {definition.category:<10} {names}")


@app.command("toolbox")
def toolbox_cmd(file: Optional[Path] = typer.Option(None, "--file", help="Toolbox YAML (default: bundled)")):
    """Print the editor toolbox as Blockly XML."""
    try:
        categories = load_toolbox(file)
    except (BlockMacroError, OSError) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    typer.echo(toolbox_xml(categories))


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """blockmacro: visual macro blocks to agent commands."""
    try:
        settings = load_settings(config)
    except BlockMacroError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )
    ctx.obj = settings


@app.command("version")
def version_cmd():
    """Print the blockmacro version."""
    typer.echo(__version__)


if __name__ == "__main__":
    app()
