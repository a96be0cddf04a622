"""Structural completeness test for the IR node hierarchy and rule tables.

This test fails if a new IR node class is added without a sample here
(so that inference is known to return a descriptor for it), or if the
builtin rule tables drift out of the closed BaseType enum.

Run directly:   python3 tests/structural/test_inference_completeness.py
Run via pytest: python3 -m pytest tests/structural/test_inference_completeness.py -v
"""

import sys
import os

# Allow running from any working directory
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from analysis.builtins import (
    CONSTRUCTOR_RULES, CONVERSION_RULES, TABULAR_CONSTRUCTORS, VECTOR_CONSTRUCTORS,
    STRING_FUNCTIONS, PREDICATE_FUNCTIONS, COUNT_FUNCTIONS,
)
from analysis.inference import infer_type_from_expr
from ir import (
    Expr, Var, Num, Str, Bool, Null, NA, UnaryOp, BinOp, Arg, Call, Index,
    Member, Namespace, Assign, Param, Function, Block, Paren,
    If, For, While, Repeat, Break, Next,
)
from runtime.types import BaseType, TypeDescriptor

# ---------------------------------------------------------------------------
# Sample instances: one per Expr subclass
# ---------------------------------------------------------------------------

def _at(cls, **fields):
    return cls(line=1, col=1, node_id=0, **fields)

ONE = _at(Num, text="1")
X = _at(Var, name="x")

SAMPLES = [
    X,
    ONE,
    _at(Str, value="s"),
    _at(Bool, value=True),
    _at(Null),
    _at(NA, text="NA"),
    _at(UnaryOp, op="-", operand=ONE),
    _at(BinOp, op="+", left=ONE, right=ONE),
    _at(Call, func=X, args=[Arg(name=None, value=ONE)]),
    _at(Index, base=X, args=[Arg(name=None, value=None)]),
    _at(Member, base=X, op="$", name="a"),
    _at(Namespace, package="base", name="c"),
    _at(Assign, op="<-", target=X, value=ONE),
    _at(Function, params=[Param(name="x")], body=X),
    _at(Block, body=[ONE]),
    _at(Paren, expr=ONE),
    _at(If, cond=X, then_body=ONE),
    _at(For, var="i", seq=X, body=ONE),
    _at(While, cond=X, body=ONE),
    _at(Repeat, body=ONE),
    _at(Break),
    _at(Next),
]

EXPECTED_SUBCLASS_COUNT = 22


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

def test_subclass_count():
    """Fail fast when an IR node class is added without updating this test."""
    subclasses = Expr.__subclasses__()
    assert len(subclasses) == EXPECTED_SUBCLASS_COUNT, (
        f"Expected {EXPECTED_SUBCLASS_COUNT} Expr subclasses, found {len(subclasses)}: "
        f"{[c.__name__ for c in subclasses]}. "
        f"Update EXPECTED_SUBCLASS_COUNT and SAMPLES in this file, then check "
        f"how infer_type_from_expr treats the new node."
    )


def test_samples_cover_all_subclasses():
    covered = {type(s) for s in SAMPLES}
    missing = set(Expr.__subclasses__()) - covered
    assert not missing, f"No sample for: {sorted(c.__name__ for c in missing)}"


def test_inference_is_total():
    """Every node kind yields a descriptor, with or without context."""
    for sample in SAMPLES:
        for context in (None, {}, {"x": TypeDescriptor(BaseType.DATA_FRAME)}):
            result = infer_type_from_expr(sample, context)
            assert isinstance(result, TypeDescriptor), type(sample).__name__


def test_rule_tables_use_builtin_tags():
    for table in (CONSTRUCTOR_RULES, CONVERSION_RULES):
        for name, tag in table.items():
            assert isinstance(tag, BaseType), name


def test_rule_tables_are_disjoint():
    tables = [
        set(VECTOR_CONSTRUCTORS), set(CONSTRUCTOR_RULES), set(CONVERSION_RULES),
        set(STRING_FUNCTIONS), set(PREDICATE_FUNCTIONS), set(COUNT_FUNCTIONS),
    ]
    seen = set()
    for table in tables:
        overlap = seen & table
        assert not overlap, f"Callee in more than one rule table: {sorted(overlap)}"
        seen |= table


def test_tabular_constructors_are_constructors():
    assert TABULAR_CONSTRUCTORS <= set(CONSTRUCTOR_RULES)


if __name__ == "__main__":
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    for fn in tests:
        fn()
        print(f"PASS {fn.__name__}")
