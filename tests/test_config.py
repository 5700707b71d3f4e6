from pathlib import Path

import pytest

from assimp_build.config import NETWORK_TIMEOUT_SECONDS, BuildConfig
from assimp_build.errors import ConfigurationError

BASE_ENV = {
    "OUT_DIR": "/tmp/out",
    "TARGET": "x86_64-unknown-linux-gnu",
    "CARGO_PKG_VERSION": "2.0.0",
    "CARGO_MANIFEST_DIR": "/src/russimp-sys",
}


def test_from_env_reads_required_values_and_defaults() -> None:
    config = BuildConfig.from_env(BASE_ENV)

    assert config.out_dir == Path("/tmp/out")
    assert config.target == "x86_64-unknown-linux-gnu"
    assert config.package_version == "2.0.0"
    assert config.manifest_dir == Path("/src/russimp-sys")
    assert config.static_link is False
    assert config.build_zlib is True
    assert config.build_from_source is False
    assert config.prebuilt is False
    assert config.package_dir is None
    assert config.offline is False
    assert config.network_timeout == NETWORK_TIMEOUT_SECONDS
    assert config.features() == ()


def test_from_env_maps_cargo_features_and_overrides() -> None:
    env = {
        **BASE_ENV,
        "CARGO_FEATURE_STATIC_LINK": "1",
        "CARGO_FEATURE_NOZLIB": "1",
        "CARGO_FEATURE_BUILD_ASSIMP": "1",
        "CARGO_FEATURE_PREBUILT": "1",
        "RUSSIMP_PACKAGE_DIR": "/cache/pkgs",
        "RUSSIMP_SOURCE_DIR": "/vendor/assimp",
        "CARGO_NET_OFFLINE": "true",
        "NUM_JOBS": "8",
    }

    config = BuildConfig.from_env(env)

    assert config.static_link is True
    assert config.build_zlib is False
    assert config.build_from_source is True
    assert config.prebuilt is True
    assert config.package_dir == Path("/cache/pkgs")
    assert config.source_dir == Path("/vendor/assimp")
    assert config.offline is True
    assert config.num_jobs == 8
    assert config.features() == ("static-link", "nozlib", "build-assimp", "prebuilt")


@pytest.mark.parametrize("missing", ["OUT_DIR", "TARGET", "CARGO_PKG_VERSION", "CARGO_MANIFEST_DIR"])
def test_from_env_reports_missing_required_variable(missing: str) -> None:
    env = {key: value for key, value in BASE_ENV.items() if key != missing}

    with pytest.raises(ConfigurationError) as excinfo:
        BuildConfig.from_env(env)

    assert missing in str(excinfo.value)
    assert excinfo.value.code == "E_CONFIGURATION"


def test_from_env_rejects_non_numeric_jobs() -> None:
    with pytest.raises(ConfigurationError):
        BuildConfig.from_env({**BASE_ENV, "NUM_JOBS": "many"})


def test_config_is_immutable() -> None:
    config = BuildConfig.from_env(BASE_ENV)

    with pytest.raises(AttributeError):
        config.target = "aarch64-apple-darwin"  # type: ignore[misc]


def test_platform_is_derived_from_target() -> None:
    config = BuildConfig.from_env({**BASE_ENV, "TARGET": "x86_64-pc-windows-msvc"})

    assert config.platform.os == "windows"
    assert config.platform.is_msvc
