"""Provision the assimp native library and generate its FFI for a Cargo build."""

from .bindings import BindgenGenerator, generate_bindings, placeholder_file
from .config import BuildConfig
from .emit import DirectiveEmitter
from .errors import (
    AcquisitionError,
    AssimpBuildError,
    ConfigurationError,
    ErrorCode,
    GenerationError,
    NativeBuildError,
)
from .link_plan import build_link_plan
from .models import (
    ArtifactLocation,
    BuildStrategy,
    LibraryRef,
    LinkKind,
    LinkPlan,
    Platform,
    RemoteArtifact,
    StrategySelection,
)
from .observability import StructuredLogger
from .pipeline import BuildResult, run
from .strategy import select_strategy

__all__ = [
    "AcquisitionError",
    "ArtifactLocation",
    "AssimpBuildError",
    "BindgenGenerator",
    "BuildConfig",
    "BuildResult",
    "BuildStrategy",
    "ConfigurationError",
    "DirectiveEmitter",
    "ErrorCode",
    "GenerationError",
    "LibraryRef",
    "LinkKind",
    "LinkPlan",
    "NativeBuildError",
    "Platform",
    "RemoteArtifact",
    "StrategySelection",
    "StructuredLogger",
    "build_link_plan",
    "generate_bindings",
    "placeholder_file",
    "run",
    "select_strategy",
]
