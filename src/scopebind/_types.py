from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar


if TYPE_CHECKING:
    from ._container import Container


T = TypeVar("T")

FactoryFunction = Callable[["Container"], T]


class Scope(Enum):
    FACTORY = "factory"
    SINGLETON = "singleton"


class Binding(Generic[T]):
    """Typed identity token for contracts that are not classes.

    Two tokens are never equal unless they are the same object, even when
    they share a name.

    Example:
      SETTINGS: Binding[dict[str, str]] = Binding("settings")
      container.bind_singleton(SETTINGS, lambda _: {"env": "dev"})

    """

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"Binding({self.name!r})"


@dataclass(frozen=True)
class BindingConfig:
    factory: Callable[[Container], Any]
    scope: Scope


def binding_name(binding: object) -> str:
    """Human-readable name of a binding, used in messages and logs."""
    if isinstance(binding, Binding):
        return binding.name
    if isinstance(binding, str):
        return binding
    if inspect.isclass(binding):
        return binding.__name__
    return repr(binding)
