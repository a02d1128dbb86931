"""
Utilities module for the Lvar interpreter
Contains common helper functions shared by the parser, interpreter,
partial evaluator and command line driver
"""

from typing import Dict, List, Tuple

from expressions import Expression, Number, ADD, SUBTRACT, READ
from error_handling import ArityMismatchError


# Exact arities enforced by the parser's strict policy
STRICT_ARITIES: Dict[str, int] = {
  ADD: 2,
  SUBTRACT: 2,
  READ: 0,
}


# ==================== VALIDATION UTILITIES ====================

def validate_arity(op_name: str, args: Tuple, min_args: int, max_args: int = -1) -> None:
  """
  Validate the number of arguments of a built-in operator

  Args:
    op_name: Operator name for error messages
    args: Argument expressions
    min_args: Minimum number of arguments
    max_args: Maximum number of arguments, -1 for unbounded

  Raises:
    ArityMismatchError if validation fails
  """
  count = len(args)
  if max_args == min_args and count != min_args:
    raise ArityMismatchError(op_name, str(min_args), count)
  if count < min_args:
    raise ArityMismatchError(op_name, f"at least {min_args}", count)
  if max_args >= 0 and count > max_args:
    raise ArityMismatchError(op_name, f"at most {max_args}", count)


# ==================== CONSTANT FOLDING UTILITIES ====================

def split_constants(exprs: List[Expression]) -> Tuple[int, List[Expression]]:
  """
  Split expressions into the sum of the Number ones and the rest

  Args:
    exprs: Already reduced expressions

  Returns:
    (constant_sum, residual) with residual in original order

  Examples:
    split_constants([Number(1), Var("x"), Number(2)]) -> (3, [Var("x")])
  """
  total = 0
  residual = []
  for expr in exprs:
    if isinstance(expr, Number):
      total += expr.value
    else:
      residual.append(expr)
  return total, residual


# ==================== SOURCE TEXT UTILITIES ====================

def paren_balance(text: str) -> int:
  """
  Count '(' minus ')' over the whole text

  Examples:
    paren_balance("(+ 1 (- 2 3))") -> 0
    paren_balance("(+ 2") -> 1
  """
  depth = 0
  for c in text:
    if c == '(':
      depth += 1
    elif c == ')':
      depth -= 1
  return depth


def has_balanced_parens(text: str) -> bool:
  return paren_balance(text) == 0
