from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._errors import NotBoundError
from ._types import Binding, BindingConfig, FactoryFunction, Scope, binding_name


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Hashable

    T = TypeVar("T")

    BindingKey = type[T] | Binding[T] | str


class Container:
    """Minimal DI container.

    - bind factories to classes, `Binding` tokens or string keys
    - scopes: factory (rebuilt on each `get`) / singleton (cached)
    - swap / reset / unbind for tests

    Factories receive the container and may call `get` on it to pull their
    own dependencies. A singleton whose factory depends on itself recurses
    until `RecursionError`; cycles are not detected.

    Singleton builds are serialized per binding, so other bindings stay
    resolvable from any thread while a factory runs. A factory that waits on
    another thread resolving the same singleton still deadlocks.
    """

    def __init__(self, *, reset_on_rebind: bool = False) -> None:
        self._configs: dict[Hashable, BindingConfig] = {}
        self._resolved: dict[Hashable, Any] = {}
        self._build_locks: dict[Hashable, threading.RLock] = {}
        self._reset_on_rebind = reset_on_rebind
        self._lock = threading.RLock()

    def bind(self, binding: BindingKey[T], factory: FactoryFunction[T], scope: Scope) -> None:
        """Register or overwrite the factory and scope for a binding.

        An already cached singleton value is kept, so `get` keeps returning it
        until `reset_singleton`, `unbind` or `swap`. Pass `reset_on_rebind=True`
        to the container to drop it here instead.

        Example:
          container.bind(HttpClient, lambda c: HttpClient(c.get(Settings)), Scope.SINGLETON)

        """
        _check_factory(binding, factory)

        if not isinstance(scope, Scope):
            msg = f"Scope must be a Scope member, got {scope!r}."
            raise TypeError(msg)

        with self._lock:
            self._configs[binding] = BindingConfig(factory=factory, scope=scope)
            if binding in self._resolved:
                self._on_rebind_resolved(binding)

        logger.debug("Bound %s (%s)", binding_name(binding), scope.value)

    def _on_rebind_resolved(self, binding: Hashable) -> None:
        if self._reset_on_rebind:
            del self._resolved[binding]
            return

        logger.warning(
            "%s was rebound while a singleton value is cached; the cached value is kept until reset",
            binding_name(binding),
        )

    def bind_factory(self, binding: BindingKey[T], factory: FactoryFunction[T]) -> None:
        """Bind a factory that is called on every `get`."""
        self.bind(binding, factory, Scope.FACTORY)

    def bind_singleton(self, binding: BindingKey[T], factory: FactoryFunction[T]) -> None:
        """Bind a factory whose first result is cached and returned from then on."""
        self.bind(binding, factory, Scope.SINGLETON)

    def bind_once(self, binding: BindingKey[T], factory: FactoryFunction[T], scope: Scope) -> bool:
        """Bind only if nothing is bound yet. Returns whether the binding was registered."""
        with self._lock:
            if self.bound(binding):
                return False
            self.bind(binding, factory, scope)
            return True

    def bound(self, binding: BindingKey[Any]) -> bool:
        return binding in self._configs

    def __contains__(self, binding: object) -> bool:
        return binding in self._configs

    def unbind(self, binding: BindingKey[Any]) -> None:
        """Remove the binding and its cached value, if any."""
        with self._lock:
            if binding not in self._configs:
                return
            del self._configs[binding]
            self._resolved.pop(binding, None)
            self._build_locks.pop(binding, None)

        logger.debug("Unbound %s", binding_name(binding))

    def swap(self, binding: BindingKey[T], factory: FactoryFunction[T]) -> None:
        """Replace the factory of a bound binding, keeping its scope.

        Any cached singleton value is dropped. Mostly useful in tests.
        """
        _check_factory(binding, factory)

        with self._lock:
            config = self._configs.get(binding)
            if config is None:
                raise NotBoundError(binding)

            self.unbind(binding)
            self.bind(binding, factory, config.scope)

        logger.debug("Swapped %s", binding_name(binding))

    def reset_singleton(self, binding: BindingKey[Any]) -> None:
        """Forget the cached singleton value; the next `get` calls the factory again."""
        with self._lock:
            if self._resolved.pop(binding, _MISSING) is not _MISSING:
                logger.debug("Reset singleton %s", binding_name(binding))

    @overload
    def get(self, binding: type[T]) -> T: ...

    @overload
    def get(self, binding: Binding[T]) -> T: ...

    @overload
    def get(self, binding: str) -> Any: ...

    def get(self, binding: BindingKey[T]) -> Any:
        """Resolve a binding.

        - Unbound: raise `NotBoundError`.
        - Singleton: return the cached value, or build, cache and return it.
        - Factory: build and return a fresh value every time.

        Exceptions from the factory propagate as is and nothing is cached.
        """
        with self._lock:
            config = self._configs.get(binding)
            if config is None:
                raise NotBoundError(binding)

            # Presence, not truthiness: falsy singletons are valid cached values.
            if binding in self._resolved:
                return self._resolved[binding]

            if config.scope is Scope.FACTORY:
                build_lock = None
            else:
                build_lock = self._build_locks.setdefault(binding, threading.RLock())

        if build_lock is None:
            return config.factory(self)

        return self._build_singleton(binding, config, build_lock)

    def _build_singleton(self, binding: Hashable, config: BindingConfig, build_lock: threading.RLock) -> Any:
        # Re-entrant so a self-dependent factory recurses instead of blocking.
        with build_lock:
            with self._lock:
                if binding in self._resolved:
                    return self._resolved[binding]

            value = config.factory(self)

            with self._lock:
                # Rebound, swapped or unbound while building: hand the value out uncached.
                if self._configs.get(binding) is config:
                    self._resolved[binding] = value
                    logger.debug("Resolved singleton %s", binding_name(binding))

            return value


def _check_factory(binding: object, factory: object) -> None:
    if not callable(factory):
        msg = f"Factory for {binding_name(binding)} must be callable, got {type(factory).__name__}."
        raise TypeError(msg)


_MISSING = object()
