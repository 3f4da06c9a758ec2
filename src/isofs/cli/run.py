"""
Commands that run filesystem operations from the command line:
- exec: Run a single command
- batch: Run one command per line of a JSON-lines file
- free-space: Print the available bytes
- actions: List the accepted command names
"""

import json
import sys
from typing import Optional

import click

from ..commands import FileCommands
from ..config import FileSystemConfig
from ..results import CommandResult


def _commands(ctx: click.Context) -> FileCommands:
    config: FileSystemConfig = ctx.obj or FileSystemConfig()
    return FileCommands(config=config)


def _emit(result: CommandResult) -> None:
    click.echo(json.dumps(result.to_dict(), ensure_ascii=False))


@click.command("exec")
@click.argument("action")
@click.argument("options", required=False, default=None)
@click.pass_context
def exec_command(ctx: click.Context, action: str, options: Optional[str]):
    """Run ACTION with the JSON OPTIONS payload and print the result.

    \b
    Examples:
        isofs exec requestFileSystem '{"type": 0}'
        isofs exec write '{"filePath": "/a.txt", "data": "hello"}'
        isofs exec readAsText '{"filePath": "/a.txt"}'
    """
    commands = _commands(ctx)
    try:
        result = commands.execute(action, options)
    finally:
        commands.close()

    _emit(result)
    if not result.is_ok:
        sys.exit(1)


@click.command()
@click.argument("requests", type=click.File("r"))
@click.option("--stop-on-error", is_flag=True, help="Stop at the first failed request")
@click.pass_context
def batch(ctx: click.Context, requests, stop_on_error: bool):
    """Run requests from a JSON-lines file ('-' for stdin).

    Each line is an object {"action": <name>, "options": {...}}. One JSON
    result is printed per request.
    """
    commands = _commands(ctx)
    failures = 0
    try:
        for line_number, line in enumerate(requests, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                request = json.loads(line)
                action = request["action"]
                options = request.get("options")
            except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
                click.echo(f"Error: line {line_number} is not a valid request: {e}", err=True)
                result = CommandResult.json_exception(f"line {line_number}")
            else:
                result = commands.execute(action, options)

            _emit(result)
            if not result.is_ok:
                failures += 1
                if stop_on_error:
                    break
    finally:
        commands.close()

    if failures:
        sys.exit(1)


@click.command("free-space")
@click.pass_context
def free_space(ctx: click.Context):
    """Print the number of bytes still available in the store."""
    commands = _commands(ctx)
    try:
        result = commands.execute("getFreeDiskSpace")
    finally:
        commands.close()

    if not result.is_ok:
        _emit(result)
        sys.exit(1)
    click.echo(result.message)


@click.command()
def actions():
    """List the command names accepted by exec and batch."""
    for name in FileCommands.in_memory().actions:
        click.echo(name)
