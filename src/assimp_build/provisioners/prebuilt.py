"""Prebuilt release archive acquisition."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from assimp_build.config import ARCHIVE_PACKAGE, BuildConfig
from assimp_build.errors import AcquisitionError
from assimp_build.fetch import extract_tar, fetch
from assimp_build.models import ArtifactLocation, LinkKind, RemoteArtifact, StrategySelection
from assimp_build.observability import StructuredLogger


def archive_name(*, version: str, target: str, kind: LinkKind) -> str:
    return f"{ARCHIVE_PACKAGE}-{version}-{target}-{kind.value}.tar.gz"


def release_url(config: BuildConfig, name: str) -> str:
    return f"{config.release_url_base}/v{config.package_version}/{name}"


def locate_archive(config: BuildConfig, selection: StrategySelection) -> Path:
    """Return a local path to the prebuilt archive, downloading it when needed."""
    name = archive_name(
        version=config.package_version,
        target=config.target,
        kind=selection.library_kind,
    )
    if config.package_dir is not None:
        archive_path = config.package_dir / name
        if not archive_path.is_file():
            raise AcquisitionError(
                "Prebuilt archive not found in RUSSIMP_PACKAGE_DIR.",
                hint="Download the release archive for this target or unset RUSSIMP_PACKAGE_DIR.",
                context={"operation": "locate_archive", "expected": str(archive_path)},
            )
        return archive_path
    return fetch(
        RemoteArtifact(url=release_url(config, name), cache_path=config.out_dir / name),
        timeout=config.network_timeout,
        offline=config.offline,
    )


@dataclass(slots=True)
class PrebuiltProvisioner:
    def provision(
        self,
        config: BuildConfig,
        selection: StrategySelection,
        logger: StructuredLogger,
    ) -> ArtifactLocation | None:
        archive_path = locate_archive(config, selection)
        destination = config.out_dir / selection.library_kind.value
        logger.log(
            operation="provision",
            stage="prebuilt",
            message=f"Unpacking prebuilt archive {archive_path.name}.",
            extra={"archive": str(archive_path), "destination": str(destination)},
        )
        extract_tar(archive_path, destination)
        return ArtifactLocation(root=destination)
