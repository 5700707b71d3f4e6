"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from assimp_build.config import BuildConfig
from assimp_build.observability import StructuredLogger


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., BuildConfig]:
    """Build a config rooted in ``tmp_path`` with per-test overrides."""

    def _make(**overrides: Any) -> BuildConfig:
        values: dict[str, Any] = {
            "out_dir": tmp_path / "out",
            "target": "x86_64-unknown-linux-gnu",
            "package_version": "2.0.0",
            "manifest_dir": tmp_path / "crate",
        }
        values.update(overrides)
        config = BuildConfig(**values)
        config.out_dir.mkdir(parents=True, exist_ok=True)
        return config

    return _make


@pytest.fixture
def logger() -> StructuredLogger:
    return StructuredLogger()
