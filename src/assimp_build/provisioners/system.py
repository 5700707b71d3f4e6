"""System-installed assimp: nothing to acquire."""

from __future__ import annotations

from dataclasses import dataclass

from assimp_build.config import BuildConfig
from assimp_build.models import ArtifactLocation, StrategySelection
from assimp_build.observability import StructuredLogger


@dataclass(slots=True)
class SystemProvisioner:
    def provision(
        self,
        config: BuildConfig,
        selection: StrategySelection,
        logger: StructuredLogger,
    ) -> ArtifactLocation | None:
        logger.log(
            operation="provision",
            stage="system",
            message="Linking against the system-installed assimp.",
        )
        return None
