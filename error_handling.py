"""
Error handling for the Lvar pipeline with detailed error messages
Parse errors are built as plain dicts and formatted; runtime errors carry
the offending name, text or arity as attributes
"""

from typing import List, Optional, Dict
from pyparsing import ParseException


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    line: int = 0,
    column: int = 0,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    if error['line']:
        error_msg = f"Parse error at line {error['line']}, column {error['column']}:\n"
    else:
        error_msg = "Parse error:\n"
    error_msg += f"  {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"  Context:\n{error['context']}\n"

    return error_msg.rstrip('\n')


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 1) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def describe_token(token) -> str:
    """Human readable form of a token for 'Got:' lines"""
    if token is None:
        return "end of input"
    if token.type == "EOF":
        return "end of input"
    if token.value is not None:
        return f"{token.type.lower()} '{token.value}'"
    return f"'{token.span.text}'" if token.span and token.span.text else token.type


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class LvarError(Exception):
    """Base class for every error the Lvar pipeline reports"""
    pass


class MalformedInputError(LvarError):
    """Structural grammar violation found while parsing"""
    def __init__(self, message: str, span=None, expected: Optional[List[str]] = None,
                 got: Optional[str] = None, context: Optional[str] = None):
        self.message = message
        self.span = span
        self.expected = expected or []
        self.got = got
        self.context = context
        super().__init__(message)

    @property
    def line(self) -> int:
        return self.span.start_line if self.span else 0

    @property
    def column(self) -> int:
        return self.span.start_col if self.span else 0

    def with_source(self, source_text: str) -> 'MalformedInputError':
        """Attach source context lines around the error position"""
        if self.span and source_text:
            self.context = get_context_lines(source_text, self.line, self.column)
        return self

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.line, self.column,
            self.expected, self.got, self.context
        )
        return format_parse_error(error_dict)


# Kept under the name the parser factories export
LvarParseError = MalformedInputError


class LvarRuntimeError(LvarError):
    """Fatal error raised while evaluating an expression"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnboundVariableError(LvarRuntimeError):
    """A variable was referenced before any let bound it"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unbound variable: {name}")


class InvalidNumericInputError(LvarRuntimeError):
    """The line supplied to read is not a base-10 integer"""
    def __init__(self, text: str, column: int = 0):
        self.text = text
        self.column = column
        shown = repr(text) if text else "empty input"
        super().__init__(f"read expected an integer, got {shown}")


class ArityMismatchError(LvarRuntimeError):
    """A built-in operator was called with the wrong number of arguments"""
    def __init__(self, operator: str, expected: str, got: int):
        self.operator = operator
        self.expected = expected
        self.got = got
        super().__init__(f"{operator} requires {expected} arguments, got {got}")


# ============================================================================
# CONVERSION OF PYPARSING EXCEPTIONS
# ============================================================================

def numeric_input_error(exc: ParseException, text: str) -> InvalidNumericInputError:
    """Convert a pyparsing failure on a read line to an Lvar error"""
    return InvalidNumericInputError(text, exc.column)


def with_numeric_input_errors(parse_func):
    """Wrapper turning pyparsing exceptions of an integer reader into InvalidNumericInputError"""
    def parse_integer(text: str):
        try:
            return parse_func(text)
        except ParseException as e:
            raise numeric_input_error(e, text) from e

    return parse_integer
