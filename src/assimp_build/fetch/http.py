"""HTTP fetch into a deterministic local cache path."""

from __future__ import annotations

import os
import shutil
from http.client import HTTPException
from pathlib import Path
from urllib.error import URLError
from urllib.request import urlopen

from assimp_build.errors import AcquisitionError
from assimp_build.models import RemoteArtifact

ACQUISITION_HINT = (
    "Enable the `prebuilt` feature, install assimp system-wide and build without features, "
    "vendor the sources manually via RUSSIMP_SOURCE_DIR, or check your network connection."
)


def ensure_network_allowed(*, offline: bool, operation: str, url: str) -> None:
    if offline:
        raise AcquisitionError(
            "Network operations are disabled (CARGO_NET_OFFLINE).",
            hint=ACQUISITION_HINT,
            context={"operation": operation, "url": url},
        )


def fetch(
    artifact: RemoteArtifact,
    *,
    timeout: float,
    offline: bool = False,
) -> Path:
    """Return ``artifact.cache_path``, downloading it first when absent."""
    if artifact.cache_path.exists():
        return artifact.cache_path
    ensure_network_allowed(offline=offline, operation="fetch", url=artifact.url)
    artifact.cache_path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = artifact.cache_path.with_name(artifact.cache_path.name + ".tmp")
    try:
        with urlopen(artifact.url, timeout=timeout) as response, temp_path.open("wb") as handle:  # noqa: S310 - fixed https endpoints
            expected = response.headers.get("Content-Length")
            shutil.copyfileobj(response, handle)
            received = handle.tell()
        if expected is not None and received != int(expected):
            raise AcquisitionError(
                "Download ended before the full artifact was received.",
                hint=ACQUISITION_HINT,
                context={
                    "operation": "fetch",
                    "url": artifact.url,
                    "expected_bytes": expected,
                    "received_bytes": str(received),
                },
            )
        os.replace(temp_path, artifact.cache_path)
    except (URLError, HTTPException, OSError, ValueError) as exc:
        raise AcquisitionError(
            "Failed to download remote artifact.",
            hint=ACQUISITION_HINT,
            context={"operation": "fetch", "url": artifact.url, "cause": str(exc)},
        ) from exc
    finally:
        temp_path.unlink(missing_ok=True)
    return artifact.cache_path
