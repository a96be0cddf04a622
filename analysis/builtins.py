# builtins.py
"""Builtin function catalog for the R type inferrer.

This module holds the fixed rule tables the inferrer dispatches on: which
callees construct containers, which convert types, and which operators and
functions always produce a given base type. Callees not listed anywhere
infer as unknown.
"""

from types import MappingProxyType

from runtime.types import BaseType

# Vector construction: only the first argument is inspected.
VECTOR_CONSTRUCTORS = frozenset({"c"})

# Container constructors. Tabular ones also record column types from
# their named arguments.
CONSTRUCTOR_RULES = MappingProxyType({
    "list": BaseType.LIST,
    "vector": BaseType.VECTOR,
    "data.frame": BaseType.DATA_FRAME,
    "data.table": BaseType.DATA_TABLE,
    "tibble": BaseType.TIBBLE,
    "tribble": BaseType.TIBBLE,
    "new.env": BaseType.ENVIRONMENT,
    "environment": BaseType.ENVIRONMENT,
    "formula": BaseType.FORMULA,
    "as.formula": BaseType.FORMULA,
})

TABULAR_CONSTRUCTORS = frozenset({"data.frame", "data.table", "tibble"})

# Type conversions return their target type.
CONVERSION_RULES = MappingProxyType({
    "as.integer": BaseType.INTEGER,
    "as.numeric": BaseType.NUMERIC,
    "as.double": BaseType.NUMERIC,
    "as.character": BaseType.CHARACTER,
    "as.logical": BaseType.LOGICAL,
    "as.complex": BaseType.COMPLEX,
    "as.raw": BaseType.RAW,
    "as.list": BaseType.LIST,
    "as.vector": BaseType.VECTOR,
    "as.data.frame": BaseType.DATA_FRAME,
    "as.data.table": BaseType.DATA_TABLE,
    "as_tibble": BaseType.TIBBLE,
    "as.function": BaseType.FUNCTION,
    "as.environment": BaseType.ENVIRONMENT,
})

ARITHMETIC_OPERATORS = frozenset({"+", "-", "*", "/", "^", "%%", "%/%"})

COMPARISON_OPERATORS = frozenset({
    "<", ">", "<=", ">=", "==", "!=",
    "&", "|", "&&", "||", "!",
})

STRING_FUNCTIONS = frozenset({
    "paste", "paste0", "sprintf", "substr", "substring", "gsub", "sub",
    "toupper", "tolower", "trimws", "format", "formatC", "sQuote", "dQuote",
})

PREDICATE_FUNCTIONS = frozenset({
    "is.null", "is.na", "is.numeric", "is.integer", "is.double",
    "is.character", "is.logical", "is.function", "is.list",
    "is.data.frame", "is.environment", "is.factor",
    "isTRUE", "isFALSE", "identical", "all", "any", "exists",
    "inherits", "grepl", "startsWith", "endsWith", "%in%",
})

COUNT_FUNCTIONS = frozenset({
    "length", "nrow", "ncol", "NROW", "NCOL", "nchar",
    "seq_len", "seq_along", "which", "nlevels",
})

# Calls for which the checker notes the expected argument type.
NUMERIC_ARGUMENT_FUNCTIONS = ("sum", "mean", "median")

# Names recognized by editor hover as builtins.
KNOWN_BUILTINS = frozenset(
    VECTOR_CONSTRUCTORS
    | set(CONSTRUCTOR_RULES)
    | set(CONVERSION_RULES)
    | STRING_FUNCTIONS
    | PREDICATE_FUNCTIONS
    | COUNT_FUNCTIONS
    | set(NUMERIC_ARGUMENT_FUNCTIONS)
)
