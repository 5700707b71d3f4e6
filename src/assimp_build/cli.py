"""Command-line entrypoint, normally invoked from a Cargo build script.

Usage:
    python -m assimp_build build
    python -m assimp_build plan
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Mapping, Sequence

from assimp_build.config import BuildConfig
from assimp_build.emit import DirectiveEmitter
from assimp_build.errors import AssimpBuildError
from assimp_build.link_plan import build_link_plan
from assimp_build.observability import StructuredLogger
from assimp_build.pipeline import run
from assimp_build.strategy import select_strategy


def cmd_build(config: BuildConfig) -> None:
    emitter = DirectiveEmitter()
    logger = StructuredLogger(echo=emitter.warning)
    run(config, emitter=emitter, logger=logger)


def cmd_plan(config: BuildConfig) -> None:
    selection = select_strategy(config)
    print(f"strategy: {selection.strategy.value}")
    for library in build_link_plan(config.platform, selection):
        print(f"link: {library}")


def main(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    parser = argparse.ArgumentParser(
        prog="assimp-build",
        description="Provision assimp and generate its bindings for a Cargo build",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("build", help="Acquire assimp, generate bindings and emit link directives")
    sub.add_parser("plan", help="Print the selected strategy and link plan without side effects")

    args = parser.parse_args(argv)
    try:
        config = BuildConfig.from_env(environ)
        if args.command == "plan":
            cmd_plan(config)
        else:
            cmd_build(config)
    except AssimpBuildError as error:
        print(f"error[{error.code}]: {error}", file=sys.stderr)
        return 1
    return 0
