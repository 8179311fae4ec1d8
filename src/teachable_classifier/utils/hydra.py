"""Hydra ConfigStore registration for pluggable components."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from hydra.core.config_store import ConfigStore
from loguru import logger

T = TypeVar("T", bound=type[Any])


def register(
    *, name: str, group: str | None = None, **defaults: Any
) -> Callable[[T], T]:
    """Class decorator that stores a ``_target_`` node in the ConfigStore.

    The node is selectable from the command line as ``<group>=<name>``,
    e.g. ``embedding=resnet18``.

    Args:
        name: Config name within the group.
        group: ConfigStore group.  Defaults to the name of the package
            that contains the decorated class's module.
        **defaults: Extra keys stored on the node (constructor kwargs).
    """

    def _store(target_cls: T) -> T:
        config_group = group or target_cls.__module__.split(".")[-2]
        node: dict[str, Any] = {
            "_target_": f"{target_cls.__module__}.{target_cls.__qualname__}",
            **defaults,
        }
        logger.debug(f"Registering {target_cls.__name__} as {config_group}={name}")
        ConfigStore.instance().store(group=config_group, name=name, node=node)
        return target_cls

    return _store
