"""Ordered library list for the final link step."""

from __future__ import annotations

from assimp_build.models import LibraryRef, LinkKind, LinkPlan, Platform, StrategySelection

PRIMARY_LIBRARY = "assimp"
EMBEDDED_ZLIB = "zlibstatic"


def build_link_plan(platform: Platform, selection: StrategySelection) -> LinkPlan:
    """Return libraries in link order: assimp, zlib, then the C++ runtime."""
    plan: list[LibraryRef] = [LibraryRef(PRIMARY_LIBRARY, selection.library_kind)]

    if selection.builds_embedded_zlib:
        plan.append(LibraryRef(EMBEDDED_ZLIB, LinkKind.STATIC))
    elif platform.os == "windows":
        plan.append(LibraryRef(EMBEDDED_ZLIB, LinkKind.DYNAMIC))
    else:
        plan.append(LibraryRef("z", LinkKind.DYNAMIC))

    runtime = _cxx_runtime(platform)
    if runtime is not None:
        plan.append(LibraryRef(runtime, LinkKind.DYNAMIC))

    return tuple(plan)


def _cxx_runtime(platform: Platform) -> str | None:
    if platform.os == "linux":
        return "stdc++"
    if platform.os == "macos":
        return "c++"
    # MSVC and other toolchains link their runtime implicitly
    return None
