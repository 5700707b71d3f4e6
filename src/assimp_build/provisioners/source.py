"""Source snapshot acquisition and the build-from-source strategy."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from assimp_build.builders import Builder, CMakeBuilder, assimp_build_spec
from assimp_build.config import BuildConfig
from assimp_build.errors import AcquisitionError
from assimp_build.fetch import ACQUISITION_HINT, extract_zip, fetch
from assimp_build.models import ArtifactLocation, RemoteArtifact, StrategySelection
from assimp_build.observability import StructuredLogger

SOURCE_DIR_NAME = "assimp"
SOURCE_MARKER = "CMakeLists.txt"
SNAPSHOT_ARCHIVE_NAME = "assimp.zip"
STAGING_DIR_NAME = ".assimp-extract"


def source_tree_path(config: BuildConfig) -> Path:
    if config.source_dir is not None:
        return config.source_dir
    return config.out_dir / SOURCE_DIR_NAME


def ensure_source_tree(config: BuildConfig, logger: StructuredLogger) -> Path:
    """Guarantee a buildable assimp source tree, downloading it when missing.

    The tree counts as complete only once its top-level ``CMakeLists.txt``
    exists, so an interrupted extraction is retried on the next run.
    """
    if config.source_dir is not None:
        return _use_vendored_source(config.source_dir, logger)

    assimp_dir = config.out_dir / SOURCE_DIR_NAME
    marker = assimp_dir / SOURCE_MARKER
    if marker.exists():
        logger.log(
            operation="ensure_source_tree",
            stage="source",
            message=f"Using cached assimp source at {assimp_dir}.",
        )
        return assimp_dir

    logger.log(
        operation="ensure_source_tree",
        stage="source",
        message="assimp source not found, downloading from GitHub.",
        extra={"url": config.source_url},
    )
    archive_path = config.out_dir / SNAPSHOT_ARCHIVE_NAME
    staging_dir = config.out_dir / STAGING_DIR_NAME
    try:
        _remove_tree(assimp_dir)
        _remove_tree(staging_dir)
        fetch(
            RemoteArtifact(url=config.source_url, cache_path=archive_path),
            timeout=config.network_timeout,
            offline=config.offline,
        )
        logger.log(
            operation="ensure_source_tree",
            stage="source",
            message="Extracting assimp source archive.",
        )
        roots = extract_zip(archive_path, staging_dir)
        # The tree only appears under its final name once extraction has finished.
        extracted = staging_dir / roots[0] if len(roots) == 1 else staging_dir
        _move_tree(extracted, assimp_dir)
    finally:
        archive_path.unlink(missing_ok=True)
        shutil.rmtree(staging_dir, ignore_errors=True)

    if not marker.exists():
        raise AcquisitionError(
            f"{SOURCE_MARKER} not found after extracting assimp.",
            hint=ACQUISITION_HINT,
            context={"operation": "ensure_source_tree", "expected": str(marker)},
        )
    logger.log(
        operation="ensure_source_tree",
        stage="source",
        message="assimp source downloaded and extracted.",
    )
    return assimp_dir


def _remove_tree(path: Path) -> None:
    if not path.exists():
        return
    try:
        shutil.rmtree(path)
    except OSError as exc:
        raise AcquisitionError(
            f"Could not remove stale directory {path.name}.",
            hint=f"Delete {path} and rebuild.",
            context={"operation": "ensure_source_tree", "path": str(path), "cause": str(exc)},
        ) from exc


def _move_tree(source: Path, destination: Path) -> None:
    try:
        source.rename(destination)
    except OSError as exc:
        raise AcquisitionError(
            "Could not move the extracted assimp source into place.",
            hint=ACQUISITION_HINT,
            context={
                "operation": "ensure_source_tree",
                "source": str(source),
                "destination": str(destination),
                "cause": str(exc),
            },
        ) from exc


def _use_vendored_source(source_dir: Path, logger: StructuredLogger) -> Path:
    marker = source_dir / SOURCE_MARKER
    if not marker.exists():
        raise AcquisitionError(
            f"RUSSIMP_SOURCE_DIR does not contain {SOURCE_MARKER}.",
            hint="Point RUSSIMP_SOURCE_DIR at the root of an assimp source checkout.",
            context={"operation": "ensure_source_tree", "expected": str(marker)},
        )
    logger.log(
        operation="ensure_source_tree",
        stage="source",
        message=f"Using vendored assimp source at {source_dir}.",
    )
    return source_dir


@dataclass(slots=True)
class SourceBuildProvisioner:
    builder: Builder = field(default_factory=CMakeBuilder)

    def provision(
        self,
        config: BuildConfig,
        selection: StrategySelection,
        logger: StructuredLogger,
    ) -> ArtifactLocation | None:
        source_dir = ensure_source_tree(config, logger)
        spec = assimp_build_spec(source_dir, config=config, selection=selection)
        logger.log(
            operation="native_build",
            stage="build",
            message="Building assimp with CMake.",
            extra={"output_dir": str(spec.output_dir), "generator": spec.generator},
        )
        location = self.builder.build(spec)
        logger.log(
            operation="native_build",
            stage="build",
            message="assimp build finished.",
        )
        return location
