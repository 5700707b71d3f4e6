"""Native build system drivers."""

from assimp_build.builders.base import Builder, BuildSpec
from assimp_build.builders.cmake import CMakeBuilder, assimp_build_spec

__all__ = ["BuildSpec", "Builder", "CMakeBuilder", "assimp_build_spec"]
