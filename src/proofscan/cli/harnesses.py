"""proofscan harnesses command - list harnesses declared in a file."""

from pathlib import Path

import click
from rich.console import Console

from proofscan.analysis.metadata import build_metadata_map
from proofscan.cli.utils import dump_json, harnesses_to_json, make_harness_table, read_source
from proofscan.core.errors import ParserUnavailableError
from proofscan.core.logging import bind_source, clear_source


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def harnesses_command(path: Path, as_json: bool) -> None:
    """Show every harness in PATH with its line, kind and attributes."""
    bind_source(path)
    try:
        harnesses = build_metadata_map(read_source(path))
    except ParserUnavailableError as e:
        raise click.ClickException(str(e)) from e
    finally:
        clear_source()

    if as_json:
        dump_json(harnesses_to_json(harnesses))
        return
    if not harnesses:
        click.echo(f"{path}: no harnesses found")
        return

    first = next(iter(harnesses.values()))
    Console().print(
        make_harness_table(harnesses, title=f"{path} ({first.total_proofs} proofs)")
    )
