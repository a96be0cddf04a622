# types.py
"""Type descriptors for R static analysis.

A TypeDescriptor pairs a base type tag with a nullable flag and an open,
read-only attribute bag (column types for tabular values, argument names
for functions, class names for S3/S4 objects).

Base type tags form a closed enum (BaseType). Projects that need more
tags register them explicitly with register_type_tag(); a registered tag
is a CustomTag. Checker equality only ever looks at the tag name.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union


class BaseType(str, Enum):
    """Builtin base type tags."""
    INTEGER = "integer"
    NUMERIC = "numeric"
    DOUBLE = "double"
    CHARACTER = "character"
    LOGICAL = "logical"
    COMPLEX = "complex"
    RAW = "raw"
    NULL = "null"
    ANY = "any"
    UNKNOWN = "unknown"
    LIST = "list"
    VECTOR = "vector"
    DATA_FRAME = "data_frame"
    DATA_TABLE = "data_table"
    TIBBLE = "tibble"
    FUNCTION = "function"
    FORMULA = "formula"
    S3 = "s3"
    S4 = "s4"
    OBJECT_REF = "object_ref"
    ENVIRONMENT = "environment"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CustomTag:
    """A base type tag registered at configuration time."""
    name: str

    def __str__(self) -> str:
        return self.name


TypeTag = Union[BaseType, CustomTag]

# R spellings accepted wherever a tag name is looked up
_ALIASES: Dict[str, BaseType] = {
    "NULL": BaseType.NULL,
    "data.frame": BaseType.DATA_FRAME,
    "data.table": BaseType.DATA_TABLE,
    "tbl_df": BaseType.TIBBLE,
    "S3": BaseType.S3,
    "S4": BaseType.S4,
    "R6": BaseType.OBJECT_REF,
}


class TypeRegistry:
    """Name -> tag lookup: builtin tags, R aliases, then registered custom tags."""

    def __init__(self) -> None:
        self._custom: Dict[str, CustomTag] = {}

    def resolve(self, name: str) -> Optional[TypeTag]:
        """Tag for `name`, or None if it is neither builtin nor registered."""
        if name in _ALIASES:
            return _ALIASES[name]
        try:
            return BaseType(name)
        except ValueError:
            return self._custom.get(name)

    def register(self, name: str) -> TypeTag:
        """Register a custom tag. Builtin names return the builtin tag."""
        if not name:
            raise ValueError("type tag name must be non-empty")
        tag = self.resolve(name)
        if tag is None:
            tag = self._custom.setdefault(name, CustomTag(name))
        return tag

    def custom_tags(self) -> Mapping[str, CustomTag]:
        return MappingProxyType(self._custom)


DEFAULT_REGISTRY = TypeRegistry()


def register_type_tag(name: str) -> TypeTag:
    """Register a custom base type tag in the default registry."""
    return DEFAULT_REGISTRY.register(name)


def resolve_type_tag(name: str) -> Optional[TypeTag]:
    """Look up a tag by name (builtin, R alias or registered)."""
    return DEFAULT_REGISTRY.resolve(name)


@dataclass(frozen=True)
class TypeDescriptor:
    """Inferred or declared type.

    `attributes` is informational and does not take part in equality.
    """
    base_type: TypeTag
    nullable: bool = False
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def name(self) -> str:
        """Tag name, e.g. "integer"."""
        return str(self.base_type)

    def is_unknown(self) -> bool:
        return self.base_type is BaseType.UNKNOWN

    def is_any(self) -> bool:
        return self.base_type is BaseType.ANY

    def same_base_type(self, other: TypeDescriptor) -> bool:
        """Equality used by the consistency checker: tag names only."""
        return self.name == other.name

    def __str__(self) -> str:
        type_str = self.name
        if self.nullable:
            type_str += " | NULL"
        if self.attributes:
            attr_str = ", ".join(f"{k}={_format_attr(v)}" for k, v in self.attributes.items())
            type_str += f"[{attr_str}]"
        return type_str


def _format_attr(value: Any) -> str:
    if isinstance(value, Mapping):
        return "{" + ", ".join(f"{k}: {v}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "(" + ", ".join(str(v) for v in value) + ")"
    return str(value)


def _tag(base: Union[str, TypeTag]) -> TypeTag:
    if isinstance(base, (BaseType, CustomTag)):
        return base
    tag = resolve_type_tag(base)
    if tag is None:
        raise ValueError(f"Unknown type: {base}")
    return tag


def create_type(base_type: Union[str, TypeTag], nullable: bool = False, **attributes: Any) -> TypeDescriptor:
    """Create a type descriptor.

    Raises:
        ValueError: a string tag that is neither builtin nor registered
    """
    return TypeDescriptor(_tag(base_type), nullable=nullable, attributes=attributes)


# Standard descriptors, one per builtin tag
TYPES: Mapping[BaseType, TypeDescriptor] = MappingProxyType({
    tag: TypeDescriptor(tag) for tag in BaseType
})


def lookup_type(name: str) -> Optional[TypeDescriptor]:
    """Descriptor for a tag name, or None if the name is not known."""
    tag = resolve_type_tag(name)
    if tag is None:
        return None
    if isinstance(tag, BaseType):
        return TYPES[tag]
    return TypeDescriptor(tag)


def _base_name(spec: Union[str, TypeDescriptor, TypeTag]) -> str:
    if isinstance(spec, TypeDescriptor):
        return spec.name
    return str(_tag(spec))


def data_table_type(**columns: Union[str, TypeDescriptor]) -> TypeDescriptor:
    """data.table descriptor with column types, e.g. data_table_type(id="integer")."""
    return create_type(BaseType.DATA_TABLE,
                       columns={k: _base_name(v) for k, v in columns.items()})


def function_type(args: Optional[Mapping[str, Union[str, TypeDescriptor]]] = None,
                  return_type: Union[str, TypeDescriptor] = "any") -> TypeDescriptor:
    """Function descriptor with argument and return types."""
    args = args or {}
    return create_type(BaseType.FUNCTION,
                       args={k: _base_name(v) for k, v in args.items()},
                       return_type=_base_name(return_type))
