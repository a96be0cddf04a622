"""Tests for assignment, call and function extraction."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from frontend.extract import (
    AssignmentRecord, extract_assignments, extract_function_calls,
    extract_functions, get_token_at_location,
)
from frontend.pipeline import parse_code
from ir import BinOp, Str


def assignments(code):
    return extract_assignments(parse_code(code))


def test_empty_input_gives_no_records():
    assert assignments("") == []
    assert assignments("# only a comment\n") == []
    assert assignments("print(1)\nf(x)") == []


def test_all_operator_forms_in_order():
    recs = assignments('a <- 1\nb = 2\n3 -> c\nd <<- 4\n5 ->> e')
    assert [r.variable for r in recs] == ["a", "b", "c", "d", "e"]
    assert [r.line for r in recs] == [1, 2, 3, 4, 5]


def test_position_is_the_operator():
    rec = assignments("  xx <- 1")[0]
    assert (rec.line, rec.col) == (1, 6)


def test_value_text_joins_tokens_with_spaces():
    rec = assignments("y <- c(1,2)+x")[0]
    assert rec.value_text == "c ( 1 , 2 ) + x"
    assert isinstance(rec.value, BinOp)


def test_right_assign_value_precedes_operator():
    rec = assignments('"a" -> x')[0]
    assert rec == AssignmentRecord(variable="x", line=1, col=5, value_text='"a"')
    assert isinstance(rec.value, Str)


def test_non_name_targets_are_skipped():
    code = "x[1] <- 2\nnames(x) <- 'a'\nx$a <- 1\nx@s <- 2\nx[[2]] <- 3"
    assert assignments(code) == []


def test_string_target():
    recs = assignments('"x" <- 5')
    assert [r.variable for r in recs] == ["x"]


def test_backquoted_target():
    recs = assignments("`my var` <- 5")
    assert [r.variable for r in recs] == ["my var"]


def test_nested_assignments():
    recs = assignments("f <- function() {\n  inner <- 1\n}\nif (ok) z <- 2")
    assert [r.variable for r in recs] == ["f", "inner", "z"]


def test_named_arguments_are_not_assignments():
    assert assignments("f(a = 1, b = 2)") == []
    assert [r.variable for r in assignments("out <- f(a = 1)")] == ["out"]


def test_chained_assignment():
    recs = assignments("a <- b <- 1")
    assert [r.variable for r in recs] == ["a", "b"]
    assert recs[0].value_text == "b <- 1"


def test_function_calls():
    calls = extract_function_calls(parse_code("x <- sum(1)\nbase::mean(y)\nobj$method(1)"))
    assert [(c.function_name, c.line) for c in calls] == [("sum", 1), ("mean", 2)]


def test_functions():
    code = "f <- function(x, y = 1) x\ng <- \\(z) z\nlapply(l, function(v) v)"
    funcs = extract_functions(parse_code(code))
    assert [(f.name, f.params) for f in funcs] == [("f", ["x", "y"]), ("g", ["z"]), (None, ["v"])]


def test_token_at_location():
    parsed = parse_code("value <- foo(1)")
    row = get_token_at_location(parsed, 1, 3)
    assert row.terminal and row.text == "value"
    row = get_token_at_location(parsed, 1, 11)
    assert row.token == "SYMBOL_FUNCTION_CALL"
    assert get_token_at_location(parsed, 5, 1) is None


if __name__ == "__main__":
    import pytest
    raise SystemExit(pytest.main([__file__]))
