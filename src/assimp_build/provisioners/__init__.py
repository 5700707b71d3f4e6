"""Acquisition strategies keyed by :class:`BuildStrategy`."""

from assimp_build.models import BuildStrategy
from assimp_build.provisioners.base import Provisioner
from assimp_build.provisioners.prebuilt import PrebuiltProvisioner
from assimp_build.provisioners.source import SourceBuildProvisioner, ensure_source_tree
from assimp_build.provisioners.system import SystemProvisioner


def default_provisioners() -> dict[BuildStrategy, Provisioner]:
    return {
        BuildStrategy.BUILD_FROM_SOURCE: SourceBuildProvisioner(),
        BuildStrategy.FETCH_PREBUILT: PrebuiltProvisioner(),
        BuildStrategy.USE_SYSTEM_INSTALLED: SystemProvisioner(),
    }


__all__ = [
    "PrebuiltProvisioner",
    "Provisioner",
    "SourceBuildProvisioner",
    "SystemProvisioner",
    "default_provisioners",
    "ensure_source_tree",
]
