from collections.abc import Mapping
from typing import Any, ClassVar

import catalogue  # noqa
from confection import Config as _Config
from confection import registry as _registry

from ndkit.typing import PathLike


class registry(_registry):
    @classmethod
    def create(cls, name: str) -> type["registry"]:
        """Create named sub-registry attached to the class."""
        if hasattr(cls, name):
            errmsg = f"'{name}' sub-registry already exists on '{cls.__name__}'"
            raise AttributeError(errmsg)
        sub = type(
            name,
            (cls,),
            {
                "__module__": cls.__module__,
                "__qualname__": f"{cls.__qualname__}.{name}",
            },
        )
        setattr(cls, name, sub)
        return sub


class Config(_Config):
    """Configuration layered over a packaged default file.

    Subclasses must point ``__default_config__`` to a ``.cfg`` file.
    User configuration (path, mapping or config object) is merged
    on top of the defaults and then optionally interpolated
    and resolved against ``__registry__``.
    """

    __default_config__: ClassVar[PathLike] = None  # type: ignore
    __registry__: ClassVar[type[registry] | None] = None

    def __init_subclass__(cls) -> None:
        if not cls.__default_config__:
            errmsg = (
                f"'{cls.__name__}' must define '__default_config__' class attribute"
            )
            raise TypeError(errmsg)

    def __init__(
        self,
        config: PathLike | dict[str, Any] | _Config | None = None,
        resolve: bool = True,
        interpolate: bool = True,
        **kwds: Any,
    ) -> None:
        static_kwds = {**kwds, "interpolate": False}
        default = _Config().from_disk(self.__default_config__, **static_kwds)
        if isinstance(config, PathLike):
            config = _Config().from_disk(config, **static_kwds)
        config = default.merge(config) if config else default
        if interpolate:
            config = config.interpolate()
        if resolve and self.__registry__:
            config = self.__registry__.resolve(config, validate=False)
        super().__init__(config)

    def lookup(self, dotpath: str, default: Any = None) -> Any:
        """Get nested value by dot-path.

        Parameters
        ----------
        dotpath
            Dot-path of the form ``"section.subsection.key"``.
        default
            Returned when any part of the dot-path is missing.
        """
        obj: Any = self
        for key in dotpath.split("."):
            if not isinstance(obj, Mapping) or key not in obj:
                return default
            obj = obj[key]
        return obj
