from functools import cache
from pathlib import Path

from ndkit.config import Config as _Config
from ndkit.config import catalogue, registry

__all__ = ("Config", "registry", "default_config")

registry.arrays: type[registry] = registry.create("arrays")

registry.arrays.kernels = catalogue.create("ndkit", "kernels", entry_points=False)


class Config(_Config):
    __default_config__ = Path(__file__).parent / "default.cfg"
    __registry__ = registry.arrays


@cache
def default_config() -> Config:
    """Packaged configuration, resolved once per process."""
    from ndkit.arrays import kernels  # noqa: F401

    return Config()
