"""CMake driver for building assimp from a source tree."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from assimp_build.builders.base import BuildSpec
from assimp_build.config import BuildConfig
from assimp_build.errors import NativeBuildError
from assimp_build.models import ArtifactLocation, LinkKind, StrategySelection


def _on_off(value: bool) -> str:
    return "ON" if value else "OFF"


def assimp_build_spec(
    source_dir: Path,
    *,
    config: BuildConfig,
    selection: StrategySelection,
) -> BuildSpec:
    """Compute the CMake options for assimp on the configured target."""
    platform = config.platform
    defines = {
        "BUILD_SHARED_LIBS": _on_off(selection.library_kind is LinkKind.DYNAMIC),
        "ASSIMP_BUILD_ASSIMP_TOOLS": "OFF",
        "ASSIMP_BUILD_TESTS": "OFF",
        "ASSIMP_BUILD_ZLIB": _on_off(selection.build_zlib),
        # https://github.com/assimp/assimp/issues/5315
        "ASSIMP_WARNINGS_AS_ERRORS": "OFF",
        "LIBRARY_SUFFIX": "",
    }
    cflags: tuple[str, ...] = ()
    generator: str | None = None
    if platform.is_msvc:
        cflags = ("/EHsc",)
        if shutil.which("ninja") is not None:
            generator = "Ninja"
    return BuildSpec(
        source=source_dir,
        output_dir=config.out_dir / selection.library_kind.value,
        defines=defines,
        cflags=cflags,
        generator=generator,
        static_crt=platform.is_msvc,
        jobs=config.num_jobs,
    )


@dataclass(slots=True)
class CMakeBuilder:
    tool: str = "cmake"

    def build(self, spec: BuildSpec) -> ArtifactLocation:
        if shutil.which(self.tool) is None:
            raise NativeBuildError(
                f"`{self.tool}` was not found in PATH.",
                hint="Install CMake, or use the `prebuilt` feature instead of `build-assimp`.",
                context={"operation": "native_build"},
            )
        spec.build_dir.mkdir(parents=True, exist_ok=True)
        self._run(self.configure_command(spec), step="configure")
        self._run(self.build_command(spec), step="build")
        return ArtifactLocation(root=spec.output_dir)

    def configure_command(self, spec: BuildSpec) -> tuple[str, ...]:
        command = [self.tool, "-S", str(spec.source), "-B", str(spec.build_dir)]
        if spec.generator is not None:
            command.extend(["-G", spec.generator])
        command.extend([
            f"-DCMAKE_INSTALL_PREFIX={spec.output_dir}",
            f"-DCMAKE_BUILD_TYPE={spec.profile}",
        ])
        if spec.static_crt:
            command.extend([
                "-DCMAKE_POLICY_DEFAULT_CMP0091=NEW",
                "-DCMAKE_MSVC_RUNTIME_LIBRARY=MultiThreaded",
            ])
        if spec.cflags:
            joined = " ".join(spec.cflags)
            command.extend([f"-DCMAKE_C_FLAGS={joined}", f"-DCMAKE_CXX_FLAGS={joined}"])
        command.extend(f"-D{name}={value}" for name, value in spec.defines.items())
        return tuple(command)

    def build_command(self, spec: BuildSpec) -> tuple[str, ...]:
        command = [
            self.tool,
            "--build",
            str(spec.build_dir),
            "--config",
            spec.profile,
            "--target",
            "install",
        ]
        if spec.jobs is not None:
            command.extend(["--parallel", str(spec.jobs)])
        return tuple(command)

    def _run(self, command: tuple[str, ...], *, step: str) -> None:
        completed = subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
        if completed.returncode != 0:
            raise NativeBuildError(
                f"CMake {step} step failed.",
                output=completed.stdout or "",
                context={
                    "operation": "native_build",
                    "returncode": str(completed.returncode),
                    "command": " ".join(command),
                },
            )
