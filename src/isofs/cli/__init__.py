"""
isofs CLI - command line front end for the isolated filesystem.

Runs filesystem commands against a store rooted at a host directory and
prints their results as JSON.

Usage:
    isofs --help
    isofs --root ./data exec getFile '{"fullPath": "/", "path": "a.txt", "options": {"create": true}}'
    isofs --root ./data batch requests.jsonl
    isofs --root ./data free-space
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ..config import FileSystemConfig
from ..utils import init_logging
from .run import actions, batch, exec_command, free_space


@click.group()
@click.version_option(package_name="isofs")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Host directory backing the store (default: $ISOFS_ROOT or ./isofs-data)"
)
@click.option(
    "--quota",
    type=int,
    default=None,
    help="Maximum number of bytes the store may hold"
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, root: Optional[Path], quota: Optional[int], verbose: bool):
    """isofs - sandboxed virtual filesystem.

    Every command is answered with a JSON result of the form
    {"status": ..., "message": ...}.
    """
    init_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = FileSystemConfig.from_env()
        if root is not None:
            config.root_directory = root
        if quota is not None:
            if quota < 0:
                raise ValueError(f"quota must be non-negative, got {quota}")
            config.quota_bytes = quota
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    ctx.obj = config


# Register commands
main.add_command(exec_command)
main.add_command(batch)
main.add_command(free_space)
main.add_command(actions)


if __name__ == "__main__":
    main()
