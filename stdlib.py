"""
Lvar Standard Library
Built-in operators and the line sources used by read
"""

from typing import Dict, Callable, Any, List, Iterable
import sys

from pyparsing import Combine, Optional as PPOptional, Word, nums, one_of

from expressions import ADD, SUBTRACT, READ
from error_handling import with_numeric_input_errors


DEFAULT_PROMPT = "> "

# Value of a call to an operator without built-in meaning
UNKNOWN_CALL_VALUE = 0

# Signature of a line source: takes the prompt, returns one line of text
LineSource = Callable[[str], str]


# ============================================================================
# LINE SOURCES
# ============================================================================

def console_line_source(prompt: str = DEFAULT_PROMPT) -> str:
  """Prompt on stdout and block for one line of stdin"""
  print(prompt, end='', flush=True)
  return sys.stdin.readline()


def make_scripted_line_source(lines: Iterable[str]) -> LineSource:
  """Line source answering from a fixed list; exhausted means empty input"""
  remaining = list(lines)

  def scripted_line_source(prompt: str = DEFAULT_PROMPT) -> str:
    if not remaining:
      return ""
    return remaining.pop(0)

  return scripted_line_source


# ============================================================================
# INTEGER INPUT
# ============================================================================

# ASCII digits only; the sign must touch the digits
_integer_line = Combine(PPOptional(one_of("+ -")) + Word(nums)).set_parse_action(lambda t: int(t[0]))


@with_numeric_input_errors
def parse_integer_line(text: str) -> int:
  """Parse a stripped input line as a base-10 integer"""
  return _integer_line.parse_string(text, parse_all=True)[0]


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

def lvar_add(values: List[int]) -> int:
  """Sum of all arguments"""
  return sum(values)


def lvar_sub(values: List[int]) -> int:
  """First argument minus the sum of the rest"""
  return values[0] - sum(values[1:])


# ============================================================================
# EFFECTFUL FUNCTIONS
# ============================================================================

def lvar_read(context: Dict) -> int:
  """Read one integer from the context's line source"""
  line = context['line_source'](context['prompt'])
  return parse_integer_line(line.strip())


# ============================================================================
# BUILT-IN OPERATOR REGISTRY
# ============================================================================

def make_builtin_operator(name: str, func: Callable, min_args: int, max_args: int = -1,
                          effectful: bool = False, type_signature: str = "") -> Dict:
  """Create a built-in operator entry"""
  return {
      'name': name,
      'func': func,
      'min_args': min_args,
      'max_args': max_args,
      'effectful': effectful,
      'type_signature': type_signature
  }


BUILTIN_OPERATORS: Dict[str, Dict] = {
    ADD: make_builtin_operator(ADD, lvar_add, 0, type_signature="Int... -> Int"),
    SUBTRACT: make_builtin_operator(SUBTRACT, lvar_sub, 1, type_signature="Int -> Int... -> Int"),
    READ: make_builtin_operator(READ, lvar_read, 0, 0, effectful=True, type_signature="-> Int"),
}


def get_builtin_operator(name: str) -> Any:
  """Get a built-in operator by name, None for uninterpreted calls"""
  return BUILTIN_OPERATORS.get(name)


def list_builtin_operators() -> List[str]:
  """List all available built-in operators"""
  return list(BUILTIN_OPERATORS.keys())
