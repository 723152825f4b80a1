"""proofscan check command - cheap pre-check for proofs in a file."""

from pathlib import Path

import click

from proofscan.analysis.metadata import check_file_for_proofs
from proofscan.cli.utils import read_source


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def check_command(ctx: click.Context, path: Path) -> None:
    """Report whether PATH mentions a proof marker or harness entry point.

    Exits with status 1 when nothing is found.
    """
    if check_file_for_proofs(read_source(path)):
        click.echo(f"{path}: proofs found")
        return
    click.echo(f"{path}: no proofs")
    ctx.exit(1)
