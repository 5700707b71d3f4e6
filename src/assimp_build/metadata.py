"""Build metadata written next to the generated bindings."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from assimp_build.config import BuildConfig
from assimp_build.models import ArtifactLocation, LinkPlan, StrategySelection
from assimp_build.observability import StructuredLogger

METADATA_FILE = "built.json"


def build_metadata(
    *,
    config: BuildConfig,
    selection: StrategySelection,
    plan: LinkPlan,
    location: ArtifactLocation | None,
    bindings_path: Path,
    logger: StructuredLogger,
) -> dict[str, Any]:
    return {
        "package": {"name": config.package_name, "version": config.package_version},
        "target": config.target,
        "host": config.host,
        "profile": config.profile,
        "features": list(config.features()),
        "strategy": selection.strategy.value,
        "library_kind": selection.library_kind.value,
        "zlib_kind": selection.zlib_kind.value,
        "link_plan": [{"name": lib.name, "kind": lib.kind.value} for lib in plan],
        "artifact_dir": str(location.root) if location is not None else None,
        "bindings": str(bindings_path),
        "logs": list(logger.records),
    }


def write_build_metadata(path: Path, payload: dict[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(payload, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return path
