"""Common contract shared by every acquisition strategy."""

from __future__ import annotations

from typing import Protocol

from assimp_build.config import BuildConfig
from assimp_build.models import ArtifactLocation, StrategySelection
from assimp_build.observability import StructuredLogger


class Provisioner(Protocol):
    def provision(
        self,
        config: BuildConfig,
        selection: StrategySelection,
        logger: StructuredLogger,
    ) -> ArtifactLocation | None:
        """Make the native library available, returning its artifact tree if one was produced."""
