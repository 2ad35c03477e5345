"""Minimal dependency injection container.

This package provides a flat registry that maps bindings (classes, typed
`Binding` tokens or string keys) to factories, with a scope deciding whether
the produced value is cached.

Exports:
- `Container`: registry supporting bind/get/swap/unbind and singleton resets.
- `Scope`: `FACTORY` (rebuilt on each `get`) or `SINGLETON` (built once, cached).
- `Binding`: typed identity token for contracts that are not classes.
- `FactoryFunction`: signature of a factory, `Callable[[Container], T]`.
- `NotBoundError`: raised by `get` and `swap` for bindings with no configuration.
"""

from ._container import Container
from ._errors import NotBoundError
from ._types import Binding, FactoryFunction, Scope


__all__ = ["Binding", "Container", "FactoryFunction", "NotBoundError", "Scope"]
