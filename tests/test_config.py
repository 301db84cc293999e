from pathlib import Path

import pytest

from ndkit.arrays.config import Config, default_config, registry
from ndkit.arrays.kernels import BoxcarKernel, GaussianKernel
from ndkit.config import Config as BaseConfig


def test_default_config() -> None:
    config = default_config()
    assert config.lookup("smoothing.n_jobs") == 1
    assert config.lookup("smoothing.method") == "direct"
    assert config.lookup("formatting.float_format") == "g"
    assert isinstance(config.lookup("regrid.kernel"), GaussianKernel)


def test_default_config_is_cached() -> None:
    assert default_config() is default_config()


def test_lookup_missing() -> None:
    config = default_config()
    assert config.lookup("smoothing.missing") is None
    assert config.lookup("missing.section", 7) == 7
    assert config.lookup("smoothing.n_jobs.deeper", "x") == "x"


def test_overrides() -> None:
    config = Config(
        {
            "smoothing": {"n_jobs": 4},
            "regrid": {"kernel": {"@kernels": "boxcar"}},
        }
    )
    assert config.lookup("smoothing.n_jobs") == 4
    assert config.lookup("smoothing.chunk_size") == 32
    assert isinstance(config.lookup("regrid.kernel"), BoxcarKernel)


def test_unresolved() -> None:
    config = Config(resolve=False)
    assert config.lookup("regrid.kernel") == {"@kernels": "gaussian"}


def test_config_from_disk(tmp_path: Path) -> None:
    path = tmp_path / "user.cfg"
    path.write_text("[smoothing]\nchunk_size = 8\n")
    config = Config(path)
    assert config.lookup("smoothing.chunk_size") == 8
    assert config.lookup("smoothing.n_jobs") == 1


def test_registry_kernels() -> None:
    assert registry.arrays.kernels.get("gaussian") is GaussianKernel
    assert registry.arrays.kernels.get("boxcar") is BoxcarKernel


def test_registry_duplicate() -> None:
    with pytest.raises(AttributeError):
        registry.create("arrays")


def test_config_requires_default() -> None:
    with pytest.raises(TypeError):

        class NoDefault(BaseConfig):
            pass
