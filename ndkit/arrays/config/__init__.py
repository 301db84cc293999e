from ._config import Config, default_config, registry

__all__ = ("Config", "default_config", "registry")
