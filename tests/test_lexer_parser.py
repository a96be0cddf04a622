"""Unit tests for the R lexer, parser and parse-data table."""
import sys
import os
# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import unittest
from frontend.lexer import lex
from frontend.r_parser import ParseError, parse_r
from frontend.pipeline import parse_code, read_source
from ir import Assign, BinOp, Block, Call, Function, If, Index, Member, Namespace, Num, Str, UnaryOp, Var


def kinds(src):
    return [t.kind for t in lex(src) if t.kind not in ("NEWLINE", "EOF")]


class TestLexer(unittest.TestCase):
    def test_assignment_operators(self):
        self.assertEqual(
            kinds("a <- 1; b <<- 2; c = 3; 4 -> d; 5 ->> e"),
            ["SYMBOL", "LEFT_ASSIGN", "NUM_CONST", "';'",
             "SYMBOL", "LEFT_ASSIGN", "NUM_CONST", "';'",
             "SYMBOL", "EQ_ASSIGN", "NUM_CONST", "';'",
             "NUM_CONST", "RIGHT_ASSIGN", "SYMBOL", "';'",
             "NUM_CONST", "RIGHT_ASSIGN", "SYMBOL"],
        )

    def test_numbers(self):
        values = [t.value for t in lex("5 5L 3.14 .5 1e-3 0xFF 2i") if t.kind == "NUM_CONST"]
        self.assertEqual(values, ["5", "5L", "3.14", ".5", "1e-3", "0xFF", "2i"])

    def test_constants_are_keywords(self):
        self.assertEqual(kinds("TRUE NA Inf NULL"), ["NUM_CONST", "NUM_CONST", "NUM_CONST", "NULL_CONST"])

    def test_dotted_identifiers(self):
        toks = [t for t in lex("data.frame .hidden ...") if t.kind == "SYMBOL"]
        self.assertEqual([t.value for t in toks], ["data.frame", ".hidden", "..."])

    def test_special_and_pipe(self):
        self.assertEqual(kinds("x %in% y |> f()"), ["SYMBOL", "SPECIAL", "SYMBOL", "PIPE", "SYMBOL", "'('", "')'"])

    def test_comments_dropped(self):
        self.assertEqual(kinds("x <- 1 # note <- here"), ["SYMBOL", "LEFT_ASSIGN", "NUM_CONST"])

    def test_raw_string(self):
        toks = lex('x <- r"(a "quoted" \\ path)"')
        self.assertEqual(toks[2].kind, "STR_CONST")
        self.assertEqual(toks[2].value, 'r"(a "quoted" \\ path)"')

    def test_positions_are_one_based_and_inclusive(self):
        toks = lex("x <- 10\n  yy")
        self.assertEqual((toks[0].line, toks[0].col, toks[0].end_col), (1, 1, 1))
        self.assertEqual((toks[2].line, toks[2].col, toks[2].end_col), (1, 6, 7))
        yy = [t for t in toks if t.value == "yy"][0]
        self.assertEqual((yy.line, yy.col, yy.end_col), (2, 3, 4))

    def test_unterminated_string_raises(self):
        with self.assertRaises(SyntaxError):
            lex('x <- "abc')


class TestParser(unittest.TestCase):
    def test_precedence(self):
        prog = parse_r("x <- 1 + 2 * 3")
        assign = prog.body[0]
        self.assertIsInstance(assign, Assign)
        self.assertIsInstance(assign.value, BinOp)
        self.assertEqual(assign.value.op, "+")
        self.assertEqual(assign.value.right.op, "*")

    def test_right_assign_swaps_roles(self):
        assign = parse_r('"a" -> x').body[0]
        self.assertIsInstance(assign, Assign)
        self.assertEqual(assign.target, Var(line=1, col=8, node_id=0, name="x"))
        self.assertIsInstance(assign.value, Str)

    def test_unary_minus_binds_tighter_than_colon(self):
        expr = parse_r("-1:2").body[0]
        self.assertIsInstance(expr, BinOp)
        self.assertEqual(expr.op, ":")
        self.assertIsInstance(expr.left, UnaryOp)

    def test_power_is_right_associative(self):
        expr = parse_r("2^3^2").body[0]
        self.assertIsInstance(expr.right, BinOp)
        self.assertIsInstance(expr.left, Num)

    def test_calls_members_and_namespaces(self):
        expr = parse_r("dplyr::filter(df$a, n = 1)[[1]]").body[0]
        self.assertIsInstance(expr, Index)
        self.assertTrue(expr.double)
        call = expr.base
        self.assertIsInstance(call, Call)
        self.assertIsInstance(call.func, Namespace)
        self.assertEqual(call.func.name, "filter")
        self.assertIsInstance(call.args[0].value, Member)
        self.assertEqual(call.args[1].name, "n")

    def test_function_and_lambda(self):
        f = parse_r("function(x, y = 2) x + y").body[0]
        self.assertIsInstance(f, Function)
        self.assertEqual([p.name for p in f.params], ["x", "y"])
        self.assertIsNotNone(f.params[1].default)
        lam = parse_r("\\(z) z").body[0]
        self.assertIsInstance(lam, Function)

    def test_newlines_inside_parens_are_ignored(self):
        prog = parse_r("f(1,\n  2)\ny <- (3 +\n 4)")
        self.assertEqual(len(prog.body), 2)

    def test_newline_after_operator_continues(self):
        prog = parse_r("x <- 1 +\n  2")
        self.assertEqual(len(prog.body), 1)

    def test_else_on_new_line_inside_braces(self):
        prog = parse_r("{\n  if (a) 1\n  else 2\n}")
        block = prog.body[0]
        self.assertIsInstance(block, Block)
        self.assertIsInstance(block.body[0], If)
        self.assertIsNotNone(block.body[0].else_body)

    def test_else_on_new_line_at_top_level_fails(self):
        with self.assertRaises(ParseError):
            parse_r("if (a) 1\nelse 2")

    def test_incomplete_assignment_fails(self):
        with self.assertRaises(ParseError) as cm:
            parse_r("x <- ")
        self.assertIn("end of input", cm.exception.message)

    def test_semicolons_separate_expressions(self):
        self.assertEqual(len(parse_r("a <- 1; b <- 2").body), 2)


class TestParseData(unittest.TestCase):
    def test_rows_link_to_parents(self):
        parsed = parse_code("x <- 5")
        rows = {r.id: r for r in parsed.parse_data}
        assign_op = [r for r in parsed.parse_data if r.token == "LEFT_ASSIGN"][0]
        parent = rows[assign_op.parent]
        self.assertEqual(parent.token, "expr")
        self.assertEqual(parent.parent, 0)
        self.assertEqual((parent.line1, parent.col1, parent.line2, parent.col2), (1, 1, 1, 6))

    def test_rows_in_source_order_with_containers_first(self):
        parsed = parse_code("x <- 5")
        tokens = [r.token for r in parsed.parse_data]
        self.assertEqual(tokens, ["expr", "expr", "SYMBOL", "LEFT_ASSIGN", "expr", "NUM_CONST"])

    def test_token_retagging(self):
        parsed = parse_code("f <- function(a = 1) a\nf(b = 2)\nobj@slot")
        tokens = {r.text: r.token for r in parsed.parse_data if r.terminal}
        self.assertEqual(tokens["a"], "SYMBOL")  # last "a" is the body reference
        self.assertIn("SYMBOL_FORMALS", [r.token for r in parsed.parse_data])
        self.assertIn("EQ_FORMALS", [r.token for r in parsed.parse_data])
        self.assertEqual(tokens["b"], "SYMBOL_SUB")
        self.assertIn("EQ_SUB", [r.token for r in parsed.parse_data])
        self.assertEqual(tokens["slot"], "SLOT")
        calls = [r.text for r in parsed.parse_data if r.token == "SYMBOL_FUNCTION_CALL"]
        self.assertEqual(calls, ["f"])

    def test_every_expr_row_has_a_node(self):
        parsed = parse_code("y <- if (x) c(1, 2) else list(a = 3)")
        expr_ids = {r.id for r in parsed.parse_data if r.token == "expr"}
        self.assertEqual(expr_ids, set(parsed.nodes))

    def test_parse_error_is_prefixed(self):
        with self.assertRaises(ParseError) as cm:
            parse_code("x <- (1")
        self.assertTrue(cm.exception.message.startswith("Parse error:"))

    def test_lexer_error_is_wrapped(self):
        with self.assertRaises(ParseError) as cm:
            parse_code("x <- 'abc")
        self.assertTrue(cm.exception.message.startswith("Parse error:"))
        self.assertEqual(cm.exception.line, 1)

    def test_missing_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            read_source("/nonexistent/path/to/file.R")
        with self.assertRaises(FileNotFoundError):
            parse_code("/nonexistent/path/to/file.R", from_file=True)


if __name__ == '__main__':
    unittest.main()
