"""Typed interfaces for native builders."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from assimp_build.models import ArtifactLocation


@dataclass(frozen=True, slots=True)
class BuildSpec:
    source: Path
    output_dir: Path
    defines: Mapping[str, str] = field(default_factory=dict)
    cflags: tuple[str, ...] = ()
    profile: str = "Release"
    generator: str | None = None
    static_crt: bool = False
    jobs: int | None = None

    @property
    def build_dir(self) -> Path:
        return self.output_dir / "build"


class Builder(Protocol):
    def build(self, spec: BuildSpec) -> ArtifactLocation:
        """Compile and install source, returning the installed artifact tree."""
