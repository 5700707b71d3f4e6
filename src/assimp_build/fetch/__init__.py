"""Remote artifact retrieval and archive unpacking."""

from assimp_build.fetch.archive import extract_tar, extract_zip
from assimp_build.fetch.http import ACQUISITION_HINT, ensure_network_allowed, fetch

__all__ = ["ACQUISITION_HINT", "ensure_network_allowed", "extract_tar", "extract_zip", "fetch"]
