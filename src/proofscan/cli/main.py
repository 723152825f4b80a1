"""ProofScan CLI - proofscan command."""

import click

from proofscan import __version__
from proofscan.cli.check import check_command
from proofscan.cli.harnesses import harnesses_command
from proofscan.cli.playback import playback_command
from proofscan.cli.scan import scan_command
from proofscan.config.loader import load_config
from proofscan.core.errors import ConfigError
from proofscan.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="proofscan")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ProofScan - find Kani and Bolero verification harnesses in Rust sources."""
    ctx.ensure_object(dict)
    try:
        config = load_config()
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    ctx.obj["config"] = config


cli.add_command(check_command, name="check")
cli.add_command(harnesses_command, name="harnesses")
cli.add_command(playback_command, name="playback")
cli.add_command(scan_command, name="scan")


if __name__ == "__main__":
    cli()
