"""Zip and gzip-tar extraction confined to a destination directory."""

from __future__ import annotations

import os
import shutil
import tarfile
import zipfile
import zlib
from pathlib import Path, PurePosixPath

from assimp_build.errors import AcquisitionError
from assimp_build.fetch.http import ACQUISITION_HINT

_CORRUPTION_ERRORS = (OSError, EOFError, zlib.error, zipfile.BadZipFile, tarfile.TarError)


def extract_zip(archive_path: Path, destination: Path) -> tuple[str, ...]:
    """Extract a zip archive and return its sorted top-level entry names."""
    destination.mkdir(parents=True, exist_ok=True)
    roots: set[str] = set()
    try:
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                if _is_root_entry(info.filename):
                    continue
                target = safe_destination(destination, info.filename, archive_path=archive_path)
                roots.add(_top_level(info.filename))
                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with archive.open(info) as src, target.open("wb") as dst:
                    shutil.copyfileobj(src, dst)
                mode = (info.external_attr >> 16) & 0o777
                if mode:
                    os.chmod(target, mode)
    except _CORRUPTION_ERRORS as exc:
        raise _corrupt(archive_path, exc) from exc
    return tuple(sorted(roots))


def extract_tar(archive_path: Path, destination: Path) -> tuple[str, ...]:
    """Extract a gzip-compressed tarball and return its sorted top-level entry names."""
    destination.mkdir(parents=True, exist_ok=True)
    roots: set[str] = set()
    try:
        with tarfile.open(archive_path, "r:gz") as archive:
            for member in archive:
                if _is_root_entry(member.name):
                    continue
                target = safe_destination(destination, member.name, archive_path=archive_path)
                roots.add(_top_level(member.name))
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                elif member.isfile():
                    _extract_tar_file(archive, member, target)
                elif member.issym():
                    _extract_tar_symlink(destination, member, target, archive_path=archive_path)
                elif member.islnk():
                    linked = safe_destination(destination, member.linkname, archive_path=archive_path)
                    target.parent.mkdir(parents=True, exist_ok=True)
                    shutil.copy2(linked, target)
                # device and fifo entries are not materialized
    except _CORRUPTION_ERRORS as exc:
        raise _corrupt(archive_path, exc) from exc
    return tuple(sorted(roots))


def safe_destination(root: Path, name: str, *, archive_path: Path) -> Path:
    """Map an archive entry name below *root*, rejecting anything that escapes it."""
    normalized = name.replace("\\", "/")
    relative = PurePosixPath(normalized)
    if (
        not normalized.strip("/")
        or relative.is_absolute()
        or ":" in relative.parts[0]
        or ".." in relative.parts
    ):
        raise _traversal(archive_path, name)
    resolved_root = root.resolve()
    target = (resolved_root / Path(*relative.parts)).resolve()
    if not target.is_relative_to(resolved_root):
        raise _traversal(archive_path, name)
    return target


def _extract_tar_file(archive: tarfile.TarFile, member: tarfile.TarInfo, target: Path) -> None:
    source = archive.extractfile(member)
    if source is None:
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    with source, target.open("wb") as dst:
        shutil.copyfileobj(source, dst)
    os.chmod(target, member.mode & 0o777 or 0o644)


def _extract_tar_symlink(
    root: Path,
    member: tarfile.TarInfo,
    target: Path,
    *,
    archive_path: Path,
) -> None:
    resolved_root = root.resolve()
    if PurePosixPath(member.linkname).is_absolute():
        raise _traversal(archive_path, member.name)
    pointee = (target.parent / member.linkname).resolve()
    if not pointee.is_relative_to(resolved_root):
        raise _traversal(archive_path, member.name)
    target.parent.mkdir(parents=True, exist_ok=True)
    if target.is_symlink() or target.exists():
        target.unlink()
    os.symlink(member.linkname, target)


def _is_root_entry(name: str) -> bool:
    parts = PurePosixPath(name.replace("\\", "/")).parts
    return all(part in ("/", ".") for part in parts)


def _top_level(name: str) -> str:
    return PurePosixPath(name.replace("\\", "/").lstrip("/")).parts[0]


def _traversal(archive_path: Path, name: str) -> AcquisitionError:
    return AcquisitionError(
        "Archive entry escapes the extraction directory.",
        hint="The archive is malformed or malicious; delete it and fetch a trusted copy.",
        context={"operation": "extract", "archive": str(archive_path), "entry": name},
    )


def _corrupt(archive_path: Path, exc: BaseException) -> AcquisitionError:
    return AcquisitionError(
        "Failed to extract archive.",
        hint=ACQUISITION_HINT,
        context={"operation": "extract", "archive": str(archive_path), "cause": str(exc)},
    )
