"""Shared fixtures for CLI tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from proofscan.config import loader


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Run each command from an empty directory with no global config."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    monkeypatch.delenv("PROOFSCAN__LOGGING__LEVEL", raising=False)
    monkeypatch.chdir(workdir)
    yield workdir
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def write_source(isolated_cli: Path):  # type: ignore[no-untyped-def]
    """Write a Rust file under the working directory and return its path."""

    def _write(relative: str, text: str) -> Path:
        path = isolated_cli / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    return _write
