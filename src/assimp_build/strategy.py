"""Acquisition strategy selection from feature flags."""

from __future__ import annotations

from assimp_build.config import BuildConfig
from assimp_build.models import BuildStrategy, LinkKind, StrategySelection
from assimp_build.observability import StructuredLogger


def select_strategy(
    config: BuildConfig,
    *,
    logger: StructuredLogger | None = None,
) -> StrategySelection:
    """Resolve the single strategy for this run.

    Building from source takes precedence over the prebuilt archive when both
    features are enabled.
    """
    if config.build_from_source:
        strategy = BuildStrategy.BUILD_FROM_SOURCE
        if config.prebuilt and logger is not None:
            logger.log(
                operation="select_strategy",
                stage="strategy",
                level="warning",
                message="Both `build-assimp` and `prebuilt` are enabled; building from source.",
            )
    elif config.prebuilt:
        strategy = BuildStrategy.FETCH_PREBUILT
    else:
        strategy = BuildStrategy.USE_SYSTEM_INSTALLED

    library_kind = LinkKind.STATIC if config.static_link else LinkKind.DYNAMIC
    embedded_zlib = strategy is BuildStrategy.BUILD_FROM_SOURCE and config.build_zlib
    return StrategySelection(
        strategy=strategy,
        library_kind=library_kind,
        zlib_kind=LinkKind.STATIC if embedded_zlib else LinkKind.DYNAMIC,
        build_zlib=config.build_zlib,
    )
