"""Core typed dataclasses for strategy selection, link plans and artifacts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Literal

TargetOs = Literal["linux", "macos", "windows", "other"]


class BuildStrategy(StrEnum):
    BUILD_FROM_SOURCE = "build-from-source"
    USE_SYSTEM_INSTALLED = "use-system-installed"
    FETCH_PREBUILT = "fetch-prebuilt"


class LinkKind(StrEnum):
    """Cargo link kinds; the values double as artifact directory names."""

    STATIC = "static"
    DYNAMIC = "dylib"


@dataclass(frozen=True, slots=True)
class LibraryRef:
    name: str
    kind: LinkKind

    def __str__(self) -> str:
        return f"{self.kind.value}={self.name}"


LinkPlan = tuple[LibraryRef, ...]


@dataclass(frozen=True, slots=True)
class StrategySelection:
    strategy: BuildStrategy
    library_kind: LinkKind
    zlib_kind: LinkKind
    build_zlib: bool

    @property
    def builds_embedded_zlib(self) -> bool:
        return self.strategy is BuildStrategy.BUILD_FROM_SOURCE and self.build_zlib


@dataclass(frozen=True, slots=True)
class ArtifactLocation:
    """A provisioned tree holding ``include/``, ``lib/`` and ``bin/``."""

    root: Path

    @property
    def include_dir(self) -> Path:
        return self.root / "include"

    @property
    def lib_dir(self) -> Path:
        return self.root / "lib"

    @property
    def bin_dir(self) -> Path:
        return self.root / "bin"

    def search_dirs(self) -> tuple[Path, ...]:
        """Return the ``lib``/``bin`` directories that were actually produced."""
        return tuple(path for path in (self.lib_dir, self.bin_dir) if path.is_dir())


@dataclass(frozen=True, slots=True)
class RemoteArtifact:
    url: str
    cache_path: Path


@dataclass(frozen=True, slots=True)
class Platform:
    """Target platform facts derived from a target triple."""

    triple: str
    arch: str
    os: TargetOs
    env: str

    @classmethod
    def from_triple(cls, triple: str) -> Platform:
        parts = triple.split("-")
        arch = parts[0]
        env = parts[3] if len(parts) > 3 else ""
        os: TargetOs
        if "windows" in parts:
            os = "windows"
        elif "darwin" in parts:
            os = "macos"
        elif "linux" in parts and not any(part.startswith("android") for part in parts):
            os = "linux"
        else:
            os = "other"
        return cls(triple=triple, arch=arch, os=os, env=env)

    @property
    def is_msvc(self) -> bool:
        return self.env == "msvc"
