"""proofscan playback command - list generated concrete-playback tests."""

from pathlib import Path

import click

from proofscan.analysis.playback import extract_generated_tests, group_by_harness
from proofscan.cli.utils import dump_json, read_source
from proofscan.core.errors import ParserUnavailableError
from proofscan.core.logging import bind_source, clear_source


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def playback_command(path: Path, as_json: bool) -> None:
    """Show replay tests generated into PATH, grouped by harness."""
    bind_source(path)
    try:
        records = extract_generated_tests(read_source(path))
    except ParserUnavailableError as e:
        raise click.ClickException(str(e)) from e
    finally:
        clear_source()

    if as_json:
        dump_json([record.to_dict() for record in records])
        return
    if not records:
        click.echo(f"{path}: no generated tests")
        return

    for harness, replays in group_by_harness(records).items():
        click.echo(f"{harness}:")
        for record in replays:
            click.echo(f"  {record.insertion_line:>5}  {record.test_function_name}")
