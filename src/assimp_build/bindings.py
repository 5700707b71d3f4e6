"""FFI declaration generation through the ``bindgen`` CLI.

assimp's ``defs.h`` includes ``config.h``, which only exists after a CMake
configure of the source tree. When it is absent an empty placeholder is put in
its place for the duration of the generator run.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from assimp_build.config import BuildConfig
from assimp_build.errors import SUPPORT_URL, GenerationError
from assimp_build.models import BuildStrategy, StrategySelection
from assimp_build.observability import StructuredLogger
from assimp_build.provisioners.source import source_tree_path

UMBRELLA_HEADER = "wrapper.h"
BINDINGS_FILE = "bindings.rs"
CONFIG_HEADER = Path("assimp") / "config.h"

ALLOWLIST_TYPES = ("ai.*",)
ALLOWLIST_FUNCTIONS = ("ai.*",)
ALLOWLIST_VARS = ("ai.*", "AI_.*")


@dataclass(frozen=True, slots=True)
class BindingRequest:
    header: Path
    include_dirs: tuple[Path, ...]
    output: Path
    allowlist_types: tuple[str, ...] = ALLOWLIST_TYPES
    allowlist_functions: tuple[str, ...] = ALLOWLIST_FUNCTIONS
    allowlist_vars: tuple[str, ...] = ALLOWLIST_VARS


def source_include_dir(config: BuildConfig, selection: StrategySelection) -> Path:
    if selection.strategy is BuildStrategy.BUILD_FROM_SOURCE:
        return source_tree_path(config) / "include"
    return config.manifest_dir / "assimp" / "include"


def binding_request(config: BuildConfig, selection: StrategySelection) -> BindingRequest:
    return BindingRequest(
        header=config.manifest_dir / UMBRELLA_HEADER,
        include_dirs=(
            config.out_dir / selection.library_kind.value / "include",
            source_include_dir(config, selection),
        ),
        output=config.out_dir / BINDINGS_FILE,
    )


@contextmanager
def placeholder_file(path: Path) -> Iterator[bool]:
    """Create an empty *path* if it is missing and remove it again on exit.

    Yields whether a placeholder was created; a pre-existing file is left untouched.
    """
    if path.exists():
        yield False
        return
    try:
        path.write_text("", encoding="utf-8")
    except OSError as exc:
        raise GenerationError(
            f"Unable to write placeholder {path.name}.",
            hint=(
                "Make sure the assimp sources are present, e.g. with "
                f'"git submodule update --init --recursive". For details see {SUPPORT_URL}'
            ),
            context={"operation": "generate_bindings", "path": str(path), "cause": str(exc)},
        ) from exc
    try:
        yield True
    finally:
        path.unlink(missing_ok=True)


@dataclass(slots=True)
class BindgenGenerator:
    tool: str = "bindgen"
    extra_args: tuple[str, ...] = ()

    def command(self, request: BindingRequest) -> tuple[str, ...]:
        command = [self.tool, str(request.header), "--output", str(request.output)]
        for pattern in request.allowlist_types:
            command.extend(["--allowlist-type", pattern])
        for pattern in request.allowlist_functions:
            command.extend(["--allowlist-function", pattern])
        for pattern in request.allowlist_vars:
            command.extend(["--allowlist-var", pattern])
        # Debug is derived by default.
        command.extend(["--with-derive-partialeq", "--with-derive-eq", "--with-derive-hash"])
        command.extend(self.extra_args)
        command.append("--")
        command.extend(f"-I{path}" for path in request.include_dirs)
        return tuple(command)

    def generate(self, request: BindingRequest) -> Path:
        if shutil.which(self.tool) is None:
            raise GenerationError(
                f"`{self.tool}` was not found in PATH.",
                context={"operation": "generate_bindings"},
            )
        command = self.command(request)
        request.output.parent.mkdir(parents=True, exist_ok=True)
        completed = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=False,
        )
        if completed.returncode != 0:
            raise GenerationError(
                "Could not generate assimp bindings.",
                context={
                    "operation": "generate_bindings",
                    "returncode": str(completed.returncode),
                    "command": " ".join(command),
                    "stderr": completed.stderr.strip(),
                },
            )
        if not request.output.is_file():
            raise GenerationError(
                "Binding generator did not write its output file.",
                context={"operation": "generate_bindings", "expected": str(request.output)},
            )
        return request.output


def generate_bindings(
    config: BuildConfig,
    selection: StrategySelection,
    logger: StructuredLogger,
    *,
    generator: BindgenGenerator | None = None,
) -> Path:
    request = binding_request(config, selection)
    active = generator or BindgenGenerator()
    config_header = request.include_dirs[-1] / CONFIG_HEADER
    with placeholder_file(config_header) as created:
        if created:
            logger.log(
                operation="generate_bindings",
                stage="bindings",
                message=f"Using an empty placeholder for {config_header}.",
            )
        output = active.generate(request)
    logger.log(
        operation="generate_bindings",
        stage="bindings",
        message=f"Wrote bindings to {output}.",
    )
    return output
