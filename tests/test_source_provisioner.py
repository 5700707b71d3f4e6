import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from assimp_build.config import BuildConfig
from assimp_build.errors import AcquisitionError
from assimp_build.observability import StructuredLogger
from assimp_build.provisioners import ensure_source_tree


def _snapshot(path: Path, root: str = "assimp-master", *, with_marker: bool = True) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr(f"{root}/", b"")
        archive.writestr(f"{root}/include/assimp/defs.h", b"#include <assimp/config.h>\n")
        if with_marker:
            archive.writestr(f"{root}/CMakeLists.txt", b"project(Assimp)\n")
    return path


def test_downloads_extracts_and_renames_snapshot_root(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
) -> None:
    snapshot = _snapshot(tmp_path / "master.zip")
    config = make_config(source_url=snapshot.as_uri())

    source_dir = ensure_source_tree(config, logger)

    assert source_dir == config.out_dir / "assimp"
    assert (source_dir / "CMakeLists.txt").exists()
    assert (source_dir / "include" / "assimp" / "defs.h").exists()
    assert not (config.out_dir / "assimp-master").exists()
    assert not (config.out_dir / "assimp.zip").exists()


def test_second_run_with_marker_performs_no_network_calls(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    config = make_config(source_url=_snapshot(tmp_path / "master.zip").as_uri())
    first = ensure_source_tree(config, logger)

    def forbidden_fetch(*args: object, **kwargs: object) -> Path:
        raise AssertionError("network fetch attempted with a valid cached source tree")

    monkeypatch.setattr("assimp_build.provisioners.source.fetch", forbidden_fetch)
    second = ensure_source_tree(config, logger)

    assert first == second


def test_stale_partial_tree_is_replaced(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
) -> None:
    config = make_config(source_url=_snapshot(tmp_path / "master.zip").as_uri())
    stale = config.out_dir / "assimp"
    (stale / "code").mkdir(parents=True)
    (stale / "code" / "half-written.cpp").write_text("int", encoding="utf-8")

    source_dir = ensure_source_tree(config, logger)

    assert (source_dir / "CMakeLists.txt").exists()
    assert not (source_dir / "code" / "half-written.cpp").exists()


def test_unreachable_endpoint_fails_without_marker(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
) -> None:
    config = make_config(source_url=(tmp_path / "does-not-exist.zip").as_uri())

    with pytest.raises(AcquisitionError) as excinfo:
        ensure_source_tree(config, logger)

    assert "prebuilt" in str(excinfo.value)
    assert not (config.out_dir / "assimp" / "CMakeLists.txt").exists()
    assert not (config.out_dir / "assimp.zip").exists()


def test_missing_descriptor_after_extraction_is_fatal(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
) -> None:
    snapshot = _snapshot(tmp_path / "master.zip", with_marker=False)
    config = make_config(source_url=snapshot.as_uri())

    with pytest.raises(AcquisitionError) as excinfo:
        ensure_source_tree(config, logger)

    expected = config.out_dir / "assimp" / "CMakeLists.txt"
    assert excinfo.value.context["expected"] == str(expected)
    assert not (config.out_dir / "assimp.zip").exists()


def test_corrupt_snapshot_is_cleaned_up(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
) -> None:
    broken = tmp_path / "master.zip"
    broken.write_bytes(b"<html>rate limited</html>")
    config = make_config(source_url=broken.as_uri())

    with pytest.raises(AcquisitionError):
        ensure_source_tree(config, logger)

    assert not (config.out_dir / "assimp.zip").exists()


def test_vendored_source_dir_skips_download(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
) -> None:
    vendored = tmp_path / "vendor" / "assimp"
    vendored.mkdir(parents=True)
    (vendored / "CMakeLists.txt").write_text("project(Assimp)\n", encoding="utf-8")
    config = make_config(source_dir=vendored, source_url="https://example.invalid/never.zip")

    assert ensure_source_tree(config, logger) == vendored
    assert not (config.out_dir / "assimp").exists()


def test_vendored_source_dir_requires_descriptor(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
) -> None:
    config = make_config(source_dir=tmp_path / "empty")

    with pytest.raises(AcquisitionError) as excinfo:
        ensure_source_tree(config, logger)

    assert "RUSSIMP_SOURCE_DIR" in str(excinfo.value)


def test_snapshot_rooted_at_assimp_is_used_as_is(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
) -> None:
    config = make_config(source_url=_snapshot(tmp_path / "master.zip", root="assimp").as_uri())

    source_dir = ensure_source_tree(config, logger)

    assert (source_dir / "CMakeLists.txt").exists()
    assert not (config.out_dir / ".assimp-extract").exists()


def test_interrupted_extraction_leaves_no_marker(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    config = make_config(source_url=_snapshot(tmp_path / "master.zip", root="assimp").as_uri())

    def partial_extract(archive_path: Path, destination: Path) -> tuple[str, ...]:
        written = destination / "assimp" / "CMakeLists.txt"
        written.parent.mkdir(parents=True)
        written.write_text("project(Assimp)\n", encoding="utf-8")
        raise AcquisitionError("Archive is corrupt or truncated.")

    monkeypatch.setattr("assimp_build.provisioners.source.extract_zip", partial_extract)

    with pytest.raises(AcquisitionError):
        ensure_source_tree(config, logger)

    assert not (config.out_dir / "assimp" / "CMakeLists.txt").exists()
    assert not (config.out_dir / ".assimp-extract").exists()


def test_failed_move_into_place_is_an_acquisition_error(
    tmp_path: Path,
    make_config: Callable[..., BuildConfig],
    logger: StructuredLogger,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    config = make_config(source_url=_snapshot(tmp_path / "master.zip").as_uri())

    def refuse_rename(self: Path, target: Path) -> Path:
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(Path, "rename", refuse_rename)

    with pytest.raises(AcquisitionError) as excinfo:
        ensure_source_tree(config, logger)

    assert excinfo.value.context["destination"] == str(config.out_dir / "assimp")
    assert "read-only filesystem" in excinfo.value.context["cause"]
    assert not (config.out_dir / ".assimp-extract").exists()
