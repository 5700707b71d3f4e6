"""End-to-end orchestration: select, provision, plan, generate, emit."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from assimp_build.bindings import UMBRELLA_HEADER, BindgenGenerator, generate_bindings
from assimp_build.config import BuildConfig
from assimp_build.emit import DirectiveEmitter
from assimp_build.link_plan import build_link_plan
from assimp_build.metadata import METADATA_FILE, build_metadata, write_build_metadata
from assimp_build.models import ArtifactLocation, BuildStrategy, LinkPlan, StrategySelection
from assimp_build.observability import StructuredLogger
from assimp_build.provisioners import Provisioner, default_provisioners
from assimp_build.strategy import select_strategy

LOG_FILE = "assimp-build.log.jsonl"


@dataclass(frozen=True, slots=True)
class BuildResult:
    selection: StrategySelection
    location: ArtifactLocation | None
    plan: LinkPlan
    bindings_path: Path
    metadata_path: Path


def run(
    config: BuildConfig,
    *,
    emitter: DirectiveEmitter,
    logger: StructuredLogger,
    provisioners: Mapping[BuildStrategy, Provisioner] | None = None,
    generator: BindgenGenerator | None = None,
) -> BuildResult:
    """Run the whole pipeline.

    Search-path and link directives are emitted only after every stage has
    succeeded, so a failure leaves nothing for Cargo to link against.
    """
    selection = select_strategy(config, logger=logger)
    logger.log(
        operation="run",
        stage="strategy",
        message=f"Selected strategy {selection.strategy.value}.",
        extra={
            "library_kind": selection.library_kind.value,
            "zlib_kind": selection.zlib_kind.value,
        },
    )

    table = provisioners if provisioners is not None else default_provisioners()
    location = table[selection.strategy].provision(config, selection, logger)
    plan = build_link_plan(config.platform, selection)

    bindings_path = generate_bindings(config, selection, logger, generator=generator)
    emitter.rerun_if_changed(config.manifest_dir / UMBRELLA_HEADER)

    payload = build_metadata(
        config=config,
        selection=selection,
        plan=plan,
        location=location,
        bindings_path=bindings_path,
        logger=logger,
    )
    metadata_path = write_build_metadata(config.out_dir / METADATA_FILE, payload)
    logger.to_json_lines(config.out_dir / LOG_FILE)

    emitter.platform_search_paths(config.platform)
    emitter.artifact_search_paths(location)
    emitter.link_plan(plan)
    return BuildResult(
        selection=selection,
        location=location,
        plan=plan,
        bindings_path=bindings_path,
        metadata_path=metadata_path,
    )
