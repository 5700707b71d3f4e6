"""Cargo build-script directive output."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from assimp_build.models import ArtifactLocation, LibraryRef, Platform

# Homebrew prefixes differ between Apple Silicon and Intel installs.
HOMEBREW_LIB_DIRS = {
    "aarch64": "/opt/homebrew/lib/",
    "x86_64": "/opt/brew/lib/",
}


@dataclass(slots=True)
class DirectiveEmitter:
    stream: TextIO = field(default_factory=lambda: sys.stdout)
    emitted: list[str] = field(default_factory=list)

    def search_path(self, path: str | Path) -> None:
        self._emit(f"cargo:rustc-link-search=native={path}")

    def link(self, library: LibraryRef) -> None:
        self._emit(f"cargo:rustc-link-lib={library.kind.value}={library.name}")

    def warning(self, message: str) -> None:
        for line in message.splitlines() or [""]:
            self._emit(f"cargo:warning={line}")

    def rerun_if_changed(self, path: str | Path) -> None:
        self._emit(f"cargo:rerun-if-changed={path}")

    def platform_search_paths(self, platform: Platform) -> None:
        if platform.os != "macos":
            return
        brew_dir = HOMEBREW_LIB_DIRS.get(platform.arch)
        if brew_dir is not None:
            self.search_path(brew_dir)

    def artifact_search_paths(self, location: ArtifactLocation | None) -> None:
        if location is None:
            return
        for directory in location.search_dirs():
            self.search_path(directory)

    def link_plan(self, plan: tuple[LibraryRef, ...]) -> None:
        for library in plan:
            self.link(library)

    def _emit(self, line: str) -> None:
        self.emitted.append(line)
        print(line, file=self.stream, flush=True)
