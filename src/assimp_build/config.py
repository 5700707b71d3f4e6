"""Immutable build configuration read once from the Cargo build environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from assimp_build.errors import ConfigurationError
from assimp_build.models import Platform

SOURCE_SNAPSHOT_URL = "https://github.com/assimp/assimp/archive/refs/heads/master.zip"
RELEASE_URL_BASE = "https://github.com/jkvargas/russimp-sys/releases/download"
ARCHIVE_PACKAGE = "russimp"
NETWORK_TIMEOUT_SECONDS = 300.0

_REQUIRED = ("OUT_DIR", "TARGET", "CARGO_PKG_VERSION", "CARGO_MANIFEST_DIR")
_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class BuildConfig:
    out_dir: Path
    target: str
    package_version: str
    manifest_dir: Path
    package_name: str = "russimp-sys"
    host: str | None = None
    profile: str | None = None
    num_jobs: int | None = None
    static_link: bool = False
    build_zlib: bool = True
    build_from_source: bool = False
    prebuilt: bool = False
    package_dir: Path | None = None
    source_dir: Path | None = None
    offline: bool = False
    source_url: str = SOURCE_SNAPSHOT_URL
    release_url_base: str = RELEASE_URL_BASE
    network_timeout: float = NETWORK_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BuildConfig:
        """Collect every environment value the pipeline needs, failing on gaps."""
        env = os.environ if environ is None else environ
        missing = [name for name in _REQUIRED if not env.get(name)]
        if missing:
            raise ConfigurationError(
                f"Required environment variable `{missing[0]}` is not set.",
                hint="Run this tool from a Cargo build script, which provides the build context.",
                context={"missing": ", ".join(missing)},
            )
        return cls(
            out_dir=Path(env["OUT_DIR"]),
            target=env["TARGET"],
            package_version=env["CARGO_PKG_VERSION"],
            manifest_dir=Path(env["CARGO_MANIFEST_DIR"]),
            package_name=env.get("CARGO_PKG_NAME") or "russimp-sys",
            host=env.get("HOST") or None,
            profile=env.get("PROFILE") or None,
            num_jobs=_parse_jobs(env.get("NUM_JOBS")),
            static_link="CARGO_FEATURE_STATIC_LINK" in env,
            build_zlib="CARGO_FEATURE_NOZLIB" not in env,
            build_from_source="CARGO_FEATURE_BUILD_ASSIMP" in env,
            prebuilt="CARGO_FEATURE_PREBUILT" in env,
            package_dir=_optional_path(env.get("RUSSIMP_PACKAGE_DIR")),
            source_dir=_optional_path(env.get("RUSSIMP_SOURCE_DIR")),
            offline=env.get("CARGO_NET_OFFLINE", "").strip().lower() in _TRUTHY,
        )

    @property
    def platform(self) -> Platform:
        return Platform.from_triple(self.target)

    def features(self) -> tuple[str, ...]:
        enabled = {
            "static-link": self.static_link,
            "nozlib": not self.build_zlib,
            "build-assimp": self.build_from_source,
            "prebuilt": self.prebuilt,
        }
        return tuple(name for name, on in enabled.items() if on)


def _optional_path(value: str | None) -> Path | None:
    return Path(value) if value else None


def _parse_jobs(value: str | None) -> int | None:
    if not value:
        return None
    try:
        jobs = int(value)
    except ValueError as exc:
        raise ConfigurationError(
            "NUM_JOBS must be an integer.",
            context={"NUM_JOBS": value},
        ) from exc
    return jobs if jobs > 0 else None
