# values.py
"""Type inference and matching for realized Python values.

Maps the kinds of values a Python caller holds onto R base types:
scalars onto atomic types, containers onto list, pandas frames onto
data_frame (with per-column types), callables onto function.
"""

from __future__ import annotations
import dataclasses
import types
from typing import Any, Dict, Union

import pandas as pd
from pandas.api import types as ptypes

from runtime.types import BaseType, CustomTag, TypeDescriptor, TYPES, create_type, lookup_type

# Tags whose values are atomic vectors in R
ATOMIC_TYPES = {
    BaseType.INTEGER, BaseType.NUMERIC, BaseType.DOUBLE, BaseType.CHARACTER,
    BaseType.LOGICAL, BaseType.COMPLEX, BaseType.RAW,
}


def series_base_type(series: pd.Series) -> BaseType:
    """Base type of a pandas column from its dtype."""
    if ptypes.is_bool_dtype(series.dtype):
        return BaseType.LOGICAL
    if ptypes.is_integer_dtype(series.dtype):
        return BaseType.INTEGER
    if ptypes.is_float_dtype(series.dtype):
        return BaseType.DOUBLE
    if ptypes.is_complex_dtype(series.dtype):
        return BaseType.COMPLEX
    if isinstance(series.dtype, pd.CategoricalDtype) or ptypes.is_datetime64_any_dtype(series.dtype):
        return BaseType.S3
    if ptypes.is_string_dtype(series):
        return BaseType.CHARACTER
    return BaseType.LIST


def infer_column_types(frame: pd.DataFrame) -> Dict[str, str]:
    """Column name -> base type name."""
    return {str(name): str(series_base_type(frame[name])) for name in frame.columns}


def infer_value_type(value: Any) -> TypeDescriptor:
    """Infer the most specific type descriptor for a realized value.

    Args:
        value: Any Python value

    Returns:
        TypeDescriptor; never raises
    """
    if value is None:
        return TYPES[BaseType.NULL]
    # bool before int: bool is an int subclass
    if ptypes.is_bool(value):
        return TYPES[BaseType.LOGICAL]
    if ptypes.is_integer(value):
        return TYPES[BaseType.INTEGER]
    if ptypes.is_float(value):
        return TYPES[BaseType.DOUBLE]
    if ptypes.is_complex(value):
        return TYPES[BaseType.COMPLEX]
    if isinstance(value, (bytes, bytearray)):
        return TYPES[BaseType.RAW]
    if isinstance(value, str):
        return TYPES[BaseType.CHARACTER]
    if isinstance(value, pd.DataFrame):
        return create_type(BaseType.DATA_FRAME, columns=infer_column_types(value))
    if isinstance(value, pd.Series):
        return create_type(BaseType.VECTOR, element_type=str(series_base_type(value)))
    if isinstance(value, (list, tuple, dict)):
        return TYPES[BaseType.LIST]
    if isinstance(value, (types.ModuleType, types.SimpleNamespace)):
        return TYPES[BaseType.ENVIRONMENT]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return create_type(BaseType.S4, **{"class": type(value).__name__})
    if callable(value):
        return TYPES[BaseType.FUNCTION]
    return create_type(BaseType.S3, **{"class": type(value).__name__})


def type_matches(value: Any, expected: Union[str, TypeDescriptor]) -> bool:
    """Check a realized value against a descriptor or a tag name.

    None matches nullable descriptors and `null`; `any` matches every
    value; `unknown` and unregistered names match nothing. Custom tags
    match instances of a class with that name anywhere in the MRO.
    """
    if isinstance(expected, str):
        expected = lookup_type(expected)
        if expected is None:
            return False

    if value is None:
        return expected.nullable or expected.base_type is BaseType.NULL
    if expected.is_any():
        return True
    if expected.is_unknown():
        return False

    if isinstance(expected.base_type, CustomTag):
        return any(cls.__name__ == expected.name for cls in type(value).__mro__)

    actual = infer_value_type(value)
    if expected.base_type is BaseType.NUMERIC:
        return actual.base_type in (BaseType.INTEGER, BaseType.DOUBLE, BaseType.NUMERIC)
    if expected.base_type is BaseType.VECTOR:
        return actual.base_type is BaseType.VECTOR or actual.base_type in ATOMIC_TYPES
    if expected.base_type in (BaseType.S3, BaseType.S4) and "class" in expected.attributes:
        return any(cls.__name__ == expected.attributes["class"] for cls in type(value).__mro__)
    return actual.same_base_type(expected)
