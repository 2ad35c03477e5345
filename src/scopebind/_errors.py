from __future__ import annotations

from ._types import binding_name


class NotBoundError(LookupError):
    """Raised when resolving or swapping a binding that has no configuration."""

    def __init__(self, binding: object) -> None:
        self.binding = binding
        self.name = binding_name(binding)
        super().__init__(f"{self.name} is not bound in the container. Did you forget to bind it?")
