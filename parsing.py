"""
Lvar Programming Language Parser
Tokenizer and recursive-descent parser with source spans
"""

from typing import List, Optional, Any
from dataclasses import dataclass, field

from pyparsing import Word, Literal, alphas, nums, col, lineno

from expressions import Number, Call, Let, Var, Binding, Expression, LET
from error_handling import MalformedInputError, LvarParseError, describe_token
from utilities import STRICT_ARITIES


# Token types
IDENTIFIER = "IDENTIFIER"
NUMBER = "NUMBER"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
EOF = "EOF"


@dataclass(frozen=True)
class SourceSpan:
    """Source location information for tokens and errors"""
    filename: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    text: str = ""

    def __str__(self) -> str:
        if self.start_line == self.end_line:
            return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_col}"
        return f"{self.filename}:{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


@dataclass(frozen=True)
class Token:
    """Lvar token with source information (span is ignored by ==)"""
    type: str
    value: Any = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def __str__(self) -> str:
        if self.value is None:
            return self.type
        return f"{self.type}({self.value})"


class LvarTokenizer:
    """Lvar tokenizer; characters outside the token set are skipped"""

    # Operator symbols lex as identifiers so call heads are uniform
    IDENTIFIER_CHARS = alphas + "+-*/"

    def __init__(self, filename: str = "<input>", debug: bool = False):
        self.filename = filename
        self.debug = debug
        self._setup_token_patterns()

    def _setup_token_patterns(self):
        """Setup the token grammar scanned over the source text"""
        number = Word(nums).set_parse_action(lambda t: (NUMBER, int(t[0])))
        identifier = Word(self.IDENTIFIER_CHARS).set_parse_action(lambda t: (IDENTIFIER, t[0]))
        lparen = Literal("(").set_parse_action(lambda t: (LPAREN, None))
        rparen = Literal(")").set_parse_action(lambda t: (RPAREN, None))

        # Keep tabs so reported columns match the text the user wrote
        self.token_pattern = (number | identifier | lparen | rparen).parse_with_tabs()

    def _make_span(self, text: str, start: int, end: int) -> SourceSpan:
        return SourceSpan(
            self.filename,
            lineno(start, text), col(start, text),
            lineno(start, text), col(start, text) + (end - start),
            text[start:end]
        )

    def tokenize(self, text: str) -> List[Token]:
        """Tokenize Lvar source code, always ending with a single EOF token"""
        tokens = []
        for result, start, end in self.token_pattern.scan_string(text):
            token_type, value = result[0]
            tokens.append(Token(token_type, value, self._make_span(text, start, end)))

        tokens.append(Token(EOF, None, self._make_span(text, len(text), len(text))))

        if self.debug:
            print(f"Tokenized {len(tokens)} tokens")
        return tokens


class ExpressionReader:
    """Recursive descent over a token list with a single cursor

    expr    := NUMBER | IDENT | '(' 'let' '(' binding+ ')' expr ')' | '(' IDENT expr* ')'
    binding := '(' IDENT expr ')'
    """

    def __init__(self, tokens: List[Token], strict_arity: bool = False, debug: bool = False):
        self.tokens = tokens
        self.pos = 0
        self.strict_arity = strict_arity
        self.debug = debug

    # ---- cursor ----

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def peek_type(self) -> Optional[str]:
        token = self.peek()
        return token.type if token else None

    def advance(self) -> Optional[Token]:
        token = self.peek()
        if token is not None:
            self.pos += 1
        return token

    def fail(self, message: str, expected: List[str], token: Optional[Token] = None):
        if token is None:
            token = self.peek()
        raise MalformedInputError(
            message,
            span=token.span if token else None,
            expected=expected,
            got=describe_token(token)
        )

    def expect(self, token_type: str, description: str) -> Token:
        token = self.peek()
        if token is None or token.type != token_type:
            if token is None or token.type == EOF:
                self.fail(f"Unexpected end of input, expected {description}", [description])
            self.fail(f"Expected {description}", [description])
        return self.advance()

    def expect_identifier(self, role: str) -> Token:
        return self.expect(IDENTIFIER, role)

    # ---- grammar ----

    def parse_program(self) -> Expression:
        """Parse exactly one expression followed by the end of the tokens"""
        expr = self.parse_expression()
        token = self.peek()
        if token is not None and token.type != EOF:
            self.fail("Unexpected trailing input after expression", ["end of input"])
        return expr

    def parse_expression(self) -> Expression:
        token_type = self.peek_type()

        if token_type == NUMBER:
            return Number(self.advance().value)
        elif token_type == IDENTIFIER:
            return Var(self.advance().value)
        elif token_type == LPAREN:
            return self.parse_list_form()
        elif token_type is None or token_type == EOF:
            self.fail("Unexpected end of input", ["number", "identifier", "'('"])
        else:
            self.fail("Unexpected token", ["number", "identifier", "'('"])

    def parse_list_form(self) -> Expression:
        self.expect(LPAREN, "'('")
        head = self.expect_identifier("operator name")

        if head.value == LET:
            return self.parse_let(head)
        return self.parse_call(head)

    def parse_let(self, head: Token) -> Let:
        self.expect(LPAREN, "'(' to open let bindings")

        bindings = []
        while self.peek_type() == LPAREN:
            bindings.append(self.parse_binding())
        if not bindings:
            self.fail("let requires at least one binding", ["'(' name expr ')'"])
        self.expect(RPAREN, "')' to close let bindings")

        body = self.parse_expression()
        self.expect(RPAREN, "')' to close let")

        if self.debug:
            print(f"Parsed let with {len(bindings)} bindings")
        return Let(tuple(bindings), body)

    def parse_binding(self) -> Binding:
        self.expect(LPAREN, "'(' to open binding")
        name = self.expect_identifier("binding name")
        value = self.parse_expression()
        self.expect(RPAREN, "')' to close binding")
        return Binding(name.value, value)

    def parse_call(self, head: Token) -> Call:
        args = []
        while True:
            token_type = self.peek_type()
            if token_type == RPAREN:
                break
            if token_type is None or token_type == EOF:
                self.fail(f"Unexpected end of input, expected ')' to close '{head.value}'", ["')'"])
            args.append(self.parse_expression())
        self.expect(RPAREN, "')'")

        expected = STRICT_ARITIES.get(head.value)
        if self.strict_arity and expected is not None and len(args) != expected:
            self.fail(
                f"'{head.value}' takes exactly {expected} argument(s), got {len(args)}",
                [f"{expected} argument(s)"],
                head
            )

        return Call(head.value, tuple(args))


class LvarParser:
    """Main Lvar parser combining tokenizer and recursive-descent reader"""

    def __init__(self, debug: bool = False, strict_arity: bool = False):
        self.debug = debug
        self.strict_arity = strict_arity

    def tokenize(self, text: str, filename: str = "<input>") -> List[Token]:
        """Tokenize Lvar source code"""
        tokenizer = LvarTokenizer(filename, self.debug)
        return tokenizer.tokenize(text)

    def parse_tokens(self, tokens: List[Token]) -> Expression:
        """Parse a token sequence into one expression"""
        reader = ExpressionReader(tokens, self.strict_arity, self.debug)
        return reader.parse_program()

    def parse_string(self, text: str, filename: str = "<input>") -> Expression:
        """Parse Lvar source code from string"""
        try:
            return self.parse_tokens(self.tokenize(text, filename))
        except MalformedInputError as e:
            e.with_source(text)
            raise

    def parse_file(self, filepath: str) -> Expression:
        """Parse an Lvar source file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_string(content, filepath)


def tokenize(source: str, filename: str = "<input>") -> List[Token]:
    """Turn source text into tokens; never fails"""
    return LvarTokenizer(filename).tokenize(source)


def parse(tokens: List[Token], strict_arity: bool = False) -> Expression:
    """Parse a token sequence; raises MalformedInputError on any structural defect"""
    return ExpressionReader(tokens, strict_arity).parse_program()


def parse_source(text: str, strict_arity: bool = False, filename: str = "<input>") -> Expression:
    """Tokenize and parse in one step, with source context in error messages"""
    return LvarParser(strict_arity=strict_arity).parse_string(text, filename)


# Factory functions for creating parsers
def create_parser(debug: bool = False, strict_arity: bool = False) -> LvarParser:
    """Create an Lvar parser"""
    return LvarParser(debug=debug, strict_arity=strict_arity)


def create_debug_parser(strict_arity: bool = False) -> LvarParser:
    """Create an Lvar parser with debug enabled"""
    return LvarParser(debug=True, strict_arity=strict_arity)
