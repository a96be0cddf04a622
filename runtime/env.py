# env.py
"""Type context: variable name -> inferred type during a left-to-right scan."""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from runtime.types import TypeDescriptor


@dataclass
class TypeContext:
    """Ordered mapping from variable names to their current types.

    One flat namespace: there is no scope chain and bindings are never
    removed, only overwritten by later assignments.
    """
    bindings: Dict[str, TypeDescriptor] = field(default_factory=dict)

    def get(self, name: str) -> Optional[TypeDescriptor]:
        """Current type of `name`, or None when unbound."""
        return self.bindings.get(name)

    def set(self, name: str, descriptor: TypeDescriptor) -> None:
        """Bind or rebind `name`, keeping its original insertion position."""
        self.bindings[name] = descriptor

    def __contains__(self, name: str) -> bool:
        return name in self.bindings

    def __getitem__(self, name: str) -> TypeDescriptor:
        return self.bindings[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    def names(self) -> list:
        return list(self.bindings)

    def copy(self) -> TypeContext:
        return TypeContext(bindings=self.bindings.copy())

    def freeze(self) -> Mapping[str, TypeDescriptor]:
        """Read-only snapshot of the current bindings."""
        return MappingProxyType(dict(self.bindings))

    def __repr__(self) -> str:
        """String representation showing all bindings."""
        parts = [f"{var_name}: {descriptor}" for var_name, descriptor in self.bindings.items()]
        return "TypeContext{" + ", ".join(parts) + "}"
