"""CLI utilities: file discovery, reading, and result rendering."""

import json
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click
import structlog
from rich.markup import escape
from rich.table import Table

from proofscan.analysis.models import GeneratedTestRecord, HarnessKind, HarnessMetadataMap
from proofscan.config.models import ScanConfig

log = structlog.get_logger(__name__)


def read_source(path: Path) -> str:
    """Read a Rust source file; undecodable bytes are replaced."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise click.ClickException(f"Cannot read {path}: {e.strerror or e}") from e


def discover_sources(root: Path, scan: ScanConfig) -> Iterator[Path]:
    """Walk ``root`` for source files, pruning excluded and hidden directories.

    Files above ``scan.max_file_size_kb`` are skipped (logged). Yields in a
    stable, sorted order.
    """
    max_bytes = scan.max_file_size_kb * 1024
    suffixes = tuple(scan.extensions)
    excluded = set(scan.exclude_dirs)

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded and not d.startswith("."))
        for filename in sorted(filenames):
            if not filename.endswith(suffixes):
                continue
            path = Path(dirpath) / filename
            try:
                size = path.stat().st_size
            except OSError:
                continue
            if size > max_bytes:
                log.info("file_skipped_too_large", path=str(path), size=size, limit=max_bytes)
                continue
            yield path


def harnesses_to_json(harnesses: HarnessMetadataMap) -> dict[str, Any]:
    return {name: metadata.to_dict() for name, metadata in harnesses.items()}


def dump_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2))


def make_harness_table(
    harnesses: HarnessMetadataMap,
    replays: dict[str, list[GeneratedTestRecord]] | None = None,
    *,
    title: str | None = None,
) -> Table:
    """One row per harness: line, kind, attribute badges and replay count.

    Unsupported attributes are shown in yellow with a trailing ``?``.
    """
    table = Table(title=title, title_justify="left", padding=(0, 1), pad_edge=False)
    table.add_column("line", style="dim", justify="right")
    table.add_column("harness", style="cyan")
    table.add_column("kind")
    table.add_column("attributes")
    if replays is not None:
        table.add_column("replays", justify="right")

    for metadata in harnesses.values():
        kind = "proof" if metadata.kind is HarnessKind.PROOF else "[magenta]unit test[/magenta]"
        badges = []
        for attribute in metadata.attributes:
            text = escape(attribute.text)
            badges.append(text if attribute.supported else f"[yellow]{text}?[/yellow]")
        row = [str(metadata.start_line), metadata.qualified_name, kind, " ".join(badges)]
        if replays is not None:
            row.append(str(len(replays.get(metadata.harness_name, []))))
        table.add_row(*row)
    return table
