"""
Parser tests for the Lvar language
Tests tree construction and malformed input reporting
"""

import pytest
from parsing import (
    tokenize, parse, parse_source, create_parser, Token,
    IDENTIFIER, NUMBER, LPAREN, RPAREN, EOF
)
from expressions import Number, Call, Let, Var, Binding
from error_handling import MalformedInputError, LvarError


class TestBasicParsing:
  """Test tree construction"""

  def test_named_operators_parse_as_calls(self, parse_text):
    """Test named operators parse as calls"""
    expected = Call("add", [Number(2), Call("subtract", [Number(4), Number(2)])])
    assert parse_text("(add 2 (subtract 4 2))") == expected

  def test_nested_call_with_read(self, parse_text):
    """Test nested call with read"""
    expected = Call("-", [
        Number(100),
        Call("+", [Number(3), Number(4), Call("read", [])]),
    ])
    assert parse_text("(- 100 (+ 3 4 (read)))") == expected

  def test_bare_number(self, parse_text):
    """Test bare number"""
    assert parse_text("42") == Number(42)

  def test_bare_identifier_is_var(self, parse_text):
    """Test bare identifier is var"""
    assert parse_text("x") == Var("x")

  def test_call_without_arguments(self, parse_text):
    """Test call without arguments"""
    assert parse_text("(read)") == Call("read", ())

  def test_let_bindings_and_body(self, parse_text):
    """Test let bindings and body"""
    expected = Let(
        [("x", Number(2)), ("y", Number(3))],
        Let([("z", Call("+", [Var("x"), Var("y")]))], Call("+", [Var("z"), Number(1)]))
    )
    assert parse_text("(let ((x 2) (y 3)) (let ((z (+ x y))) (+ z 1)))") == expected

  def test_let_bindings_are_binding_values(self, parse_text):
    """Test let bindings are binding values"""
    let = parse_text("(let ((a 1)) a)")
    assert let.bindings == (Binding("a", Number(1)),)
    assert let.body == Var("a")

  def test_parse_from_token_list(self):
    """Test parse from token list"""
    tokens = [Token(LPAREN), Token(IDENTIFIER, "+"), Token(NUMBER, 1), Token(NUMBER, 2), Token(RPAREN), Token(EOF)]
    assert parse(tokens) == Call("+", [Number(1), Number(2)])

  def test_token_list_without_eof(self):
    """Test parsing a token list without EOF"""
    tokens = [Token(LPAREN), Token(IDENTIFIER, "read"), Token(RPAREN)]
    assert parse(tokens) == Call("read", [])

  def test_generic_policy_accepts_any_arity(self, parse_text):
    """Test generic policy accepts any arity"""
    assert parse_text("(+ 20 1 15 (- 10 3))") == Call("+", [
        Number(20), Number(1), Number(15), Call("-", [Number(10), Number(3)])
    ])
    assert parse_text("(read 1)") == Call("read", [Number(1)])

  def test_strict_policy_accepts_binary_operators(self, parse_text):
    """Test strict policy accepts binary operators"""
    assert parse_text("(+ 2 (- 4 2))", strict_arity=True) == Call("+", [
        Number(2), Call("-", [Number(4), Number(2)])
    ])

  def test_strict_policy_leaves_unknown_operators_alone(self, parse_text):
    """Test strict policy leaves unknown operators alone"""
    assert parse_text("(foo 1 2 3)", strict_arity=True) == Call("foo", [Number(1), Number(2), Number(3)])


class TestMalformedInput:
  """Every structural defect aborts the parse"""

  @pytest.mark.parametrize("source", [
      "(+ 2",
      "(+ 2 (- 4 2)",
      "",
      ")",
      "()",
      "(1 2)",
      "(let (x 2) x)",
      "(let () 1)",
      "(let ((x 2)) x",
      "(let ((x 2)))",
      "(let ((1 2)) 3)",
      "(let ((x 2) 5) x)",
      "(let x)",
      "(+ 1 2) 3",
      "(+ 1 2))",
  ])
  def test_malformed_sources(self, parse_text, source):
    """Test malformed sources"""
    with pytest.raises(MalformedInputError):
      parse_text(source)

  def test_missing_close_paren_is_reported(self, parse_text):
    """Test missing close paren is reported"""
    with pytest.raises(MalformedInputError) as info:
      parse_text("(+ 2")
    assert "')'" in info.value.expected
    assert info.value.got == "end of input"

  def test_malformed_input_is_an_lvar_error(self, parse_text):
    """Test malformed input is an LvarError"""
    with pytest.raises(LvarError):
      parse_text("(")

  def test_head_must_be_identifier(self, parse_text):
    """Test head must be identifier"""
    with pytest.raises(MalformedInputError) as info:
      parse_text("(5 1)")
    assert "operator name" in info.value.expected
    assert info.value.got == "number '5'"

  @pytest.mark.parametrize("source", ["(+ 1)", "(+ 1 2 3)", "(- 1)", "(read 1)"])
  def test_strict_policy_rejects_wrong_arity(self, parse_text, source):
    """Test strict policy rejects wrong arity"""
    with pytest.raises(MalformedInputError):
      parse_text(source, strict_arity=True)


class TestErrorReporting:
  """Error messages carry source positions"""

  def test_error_has_line_and_column(self):
    """Test error has line and column"""
    with pytest.raises(MalformedInputError) as info:
      parse_source("(+ 1\n   (5))")
    assert info.value.line == 2
    assert info.value.column == 5

  def test_error_message_shows_context(self):
    """Test error message shows context"""
    with pytest.raises(MalformedInputError) as info:
      parse_source("(let () 1)")
    message = str(info.value)
    assert "line 1, column 7" in message
    assert "(let () 1)" in message
    assert "^ Error here" in message

  def test_parser_object_parses_files(self, tmp_path):
    """Test parser object parses files"""
    script = tmp_path / "prog.lvar"
    script.write_text("(+ 2 (- 4 2))")
    parser = create_parser()
    assert parser.parse_file(str(script)) == Call("+", [Number(2), Call("-", [Number(4), Number(2)])])
