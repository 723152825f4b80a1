"""proofscan scan command - find harnesses across a source tree."""

from pathlib import Path

import click
from rich.console import Console

from proofscan.analysis.metadata import build_metadata_map, check_file_for_proofs
from proofscan.analysis.playback import extract_generated_tests, group_by_harness
from proofscan.cli.utils import (
    discover_sources,
    dump_json,
    harnesses_to_json,
    make_harness_table,
    read_source,
)
from proofscan.config.models import ProofScanConfig
from proofscan.core.errors import ParserUnavailableError
from proofscan.core.logging import bind_source, clear_source


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def scan_command(ctx: click.Context, root: Path, as_json: bool) -> None:
    """Scan ROOT (default: current directory) for Rust files with harnesses.

    Files failing the cheap pre-check are not parsed.
    """
    config: ProofScanConfig = ctx.obj["config"]
    results: dict[str, dict[str, object]] = {}
    console = Console()
    found = 0

    for path in discover_sources(root, config.scan):
        source = read_source(path)
        if not check_file_for_proofs(source):
            continue
        bind_source(path)
        try:
            harnesses = build_metadata_map(source)
            replays = group_by_harness(extract_generated_tests(source))
        except ParserUnavailableError as e:
            raise click.ClickException(str(e)) from e
        finally:
            clear_source()
        if not harnesses:
            continue
        found += len(harnesses)

        relative = str(path.relative_to(root))
        if as_json:
            results[relative] = {
                "harnesses": harnesses_to_json(harnesses),
                "generated_tests": {
                    harness: [record.to_dict() for record in records]
                    for harness, records in replays.items()
                },
            }
        else:
            console.print(make_harness_table(harnesses, replays, title=relative))

    if as_json:
        dump_json(results)
    elif not found:
        click.echo(f"{root}: no harnesses found")
