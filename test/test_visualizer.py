"""
AST printer tests for the Lvar language
"""

import pytest
from visualizer import visualize, pretty_print_ast, pretty_print_tokens
from expressions import Number, Call, Let, Var
from parsing import tokenize


class TestVisualize:
  """Canonical text output"""

  def test_number(self):
    """Test number"""
    assert visualize(Number(42)) == "42"

  def test_call(self):
    """Test call"""
    assert visualize(Call("+", [Number(2), Call("-", [Number(4), Number(2)])])) == "(+ 2 (- 4 2))"

  def test_call_without_arguments(self):
    """Test call without arguments"""
    assert visualize(Call("read", [])) == "(read)"

  def test_let(self):
    """Test let"""
    expr = Let([("x", Number(2)), ("y", Call("read", []))], Call("+", [Var("x"), Var("y")]))
    assert visualize(expr) == "(let ((x 2) (y (read))) (+ x y))"

  def test_var(self):
    """Test var"""
    assert visualize(Var("abc")) == "abc"

  def test_negative_number(self):
    """Test negative number"""
    assert visualize(Number(-4)) == "-4"

  def test_source_is_normalized(self, parse_text):
    """Test source is normalized"""
    assert visualize(parse_text("  ( +   2\n(-  4 2 ) )")) == "(+ 2 (- 4 2))"

  def test_rejects_non_expressions(self):
    """Test rejects non expressions"""
    with pytest.raises(TypeError):
      visualize("(+ 1 2)")


class TestDebugPrinters:
  """Tree and token dumps used by --parse"""

  def test_pretty_print_ast(self, parse_text):
    """Test pretty print ast"""
    text = pretty_print_ast(parse_text("(let ((x 1)) (+ x 2))"))
    assert text.splitlines() == [
        "Let",
        "  Binding('x')",
        "    Number(1)",
        "  Body",
        "    Call('+')",
        "      Var(x)",
        "      Number(2)",
    ]

  def test_pretty_print_tokens(self):
    """Test pretty print tokens"""
    text = pretty_print_tokens(tokenize("(read)"))
    lines = text.splitlines()
    assert len(lines) == 4
    assert lines[1].strip() == "1:2  IDENTIFIER(read)"
    assert lines[-1].strip().endswith("EOF")
