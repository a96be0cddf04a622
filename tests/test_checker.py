"""Tests for the type consistency checker."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import tempfile
import unittest
from pathlib import Path

from analysis.checker import CheckResult, check_file, check_types, types_drifted
from analysis.context import CheckOptions
from analysis.diagnostics import Kind
from runtime.types import BaseType, TYPES


class TestDrift(unittest.TestCase):
    def test_reassignment_with_different_type_warns(self):
        result = check_types('x <- 5\nx <- "hello"')
        self.assertEqual(len(result.warnings), 1)
        w = result.warnings[0]
        self.assertEqual(w.variable, "x")
        self.assertEqual(w.kind, Kind.WARNING)
        self.assertEqual(w.code, "W_TYPE_DRIFT")
        self.assertEqual(w.message, "Variable 'x' reassigned with different type: was integer, now character")
        self.assertEqual((w.line, w.col), (2, 3))

    def test_reassignment_with_same_type_is_silent(self):
        result = check_types("x <- 5\nx <- 10")
        self.assertEqual(result.warnings, ())
        self.assertEqual(result.errors, ())

    def test_three_assignment_chain_compares_against_previous(self):
        result = check_types('x <- 5\nx <- "a"\nx <- TRUE')
        self.assertEqual([w.message for w in result.warnings], [
            "Variable 'x' reassigned with different type: was integer, now character",
            "Variable 'x' reassigned with different type: was character, now logical",
        ])
        self.assertEqual([w.line for w in result.warnings], [2, 3])
        self.assertEqual(result.final_context["x"].name, "logical")

    def test_unknown_never_warns(self):
        result = check_types('x <- 5\nx <- mystery()\nx <- "a"\ny <- z\ny <- 1')
        self.assertEqual(result.warnings, ())
        self.assertEqual(result.final_context["x"].name, "character")

    def test_right_assignment_binds_target(self):
        result = check_types('"a" -> x\nx <- 1')
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("was character, now integer", result.warnings[0].message)

    def test_subscript_assignment_is_ignored(self):
        result = check_types('x <- 1\nx[1] <- "a"\nnames(x) <- "n"')
        self.assertEqual(result.warnings, ())
        self.assertEqual(list(result.final_context), ["x"])

    def test_rhs_uses_earlier_bindings(self):
        result = check_types('a <- "s"\nb <- 1\nb <- a')
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("was integer, now character", result.warnings[0].message)

    def test_attributes_do_not_matter(self):
        result = check_types("df <- data.frame(a = 1)\ndf <- data.frame(b = 'x')")
        self.assertEqual(result.warnings, ())


class TestResultShape(unittest.TestCase):
    def test_no_assignments(self):
        result = check_types("print('hello')\n# comment")
        self.assertEqual(result.errors, ())
        self.assertEqual(result.warnings, ())
        self.assertEqual(len(result.final_context), 0)

    def test_empty_source(self):
        result = check_types("")
        self.assertTrue(result.ok)
        self.assertEqual(result.all_diagnostics(), ())

    def test_malformed_source_is_a_single_error(self):
        result = check_types("x <- ")
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.warnings, ())
        self.assertEqual(result.info, ())
        err = result.errors[0]
        self.assertTrue(err.message.startswith("Parse error:"))
        self.assertEqual((err.line, err.col), (0, 0))
        self.assertEqual(err.code, "E_PARSE")
        self.assertFalse(result.ok)

    def test_long_operator_chain_returns_result(self):
        result = check_types("x <- " + " + ".join(["1"] * 1000))
        self.assertIsInstance(result, CheckResult)
        self.assertEqual(result.errors, ())
        self.assertIn("x", result.final_context)

    def test_deep_nesting_is_a_parse_error(self):
        result = check_types("x <- " + "(" * 1000 + "1" + ")" * 1000)
        self.assertIsInstance(result, CheckResult)
        self.assertEqual(len(result.errors), 1)
        self.assertEqual(result.errors[0].message, "Parse error: expression nested too deeply")
        self.assertEqual(result.warnings, ())

    def test_idempotent(self):
        code = 'x <- 5\nx <- "a"\ny <- mean(c(1, 2))'
        self.assertEqual(check_types(code), check_types(code))

    def test_result_is_immutable(self):
        result = check_types("x <- 1")
        with self.assertRaises(TypeError):
            result.final_context["x"] = TYPES[BaseType.CHARACTER]
        self.assertIsInstance(result.warnings, tuple)

    def test_info_for_numeric_functions(self):
        result = check_types("a <- sum(1, 2)\nb <- mean(x)\nmedian(y)\nmax(z)")
        self.assertEqual([i.message for i in result.info], [
            "Function 'sum' expects numeric arguments",
            "Function 'mean' expects numeric arguments",
            "Function 'median' expects numeric arguments",
        ])
        self.assertEqual([(i.line, i.col) for i in result.info], [(1, 6), (2, 6), (3, 1)])

    def test_info_functions_are_configurable(self):
        result = check_types("max(1)\nsum(2)", options=CheckOptions(info_functions=("max",)))
        self.assertEqual([i.message for i in result.info], ["Function 'max' expects numeric arguments"])

    def test_strict_has_no_effect(self):
        code = 'x <- 5\nx <- "a"\nsum(1)'
        self.assertEqual(check_types(code, strict=True), check_types(code))


class TestFiles(unittest.TestCase):
    def test_check_file(self):
        with tempfile.TemporaryDirectory() as d:
            path = Path(d) / "script.R"
            path.write_text('x <- 1L\nx <- "a"\n')
            result = check_file(str(path))
            self.assertEqual(len(result.warnings), 1)
            self.assertEqual(check_types(str(path), from_file=True), result)

    def test_check_file_missing_raises(self):
        with self.assertRaises(FileNotFoundError):
            check_file("/nonexistent/script.R")

    def test_check_types_missing_file_is_an_error_result(self):
        result = check_types("/nonexistent/script.R", from_file=True)
        self.assertEqual(len(result.errors), 1)
        self.assertTrue(result.errors[0].message.startswith("Parse error:"))


def test_types_drifted():
    integer, character, unknown = (TYPES[BaseType.INTEGER], TYPES[BaseType.CHARACTER], TYPES[BaseType.UNKNOWN])
    assert types_drifted(integer, character)
    assert not types_drifted(None, character)
    assert not types_drifted(integer, integer)
    assert not types_drifted(unknown, character)
    assert not types_drifted(integer, unknown)
    assert isinstance(CheckResult(), CheckResult)


if __name__ == '__main__':
    unittest.main()
