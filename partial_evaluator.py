"""
Lvar Partial Evaluator
Folds constant sub-expressions of + and - into numbers and rebuilds the
rest of the tree unchanged. read and uninterpreted calls are opaque:
they are neither folded nor entered. Never performs I/O.
"""

from typing import List

from expressions import Number, Call, Let, Var, Binding, Expression, ADD, SUBTRACT, node_label
from utilities import split_constants


# ============================================================================
# REWRITE FUNCTIONS
# ============================================================================

def partial_eval_ast(ast_node: Expression, debug: bool = False) -> Expression:
  """Return a new tree with every foldable constant sub-expression reduced"""
  if debug:
    print(f"Folding: {node_label(ast_node)}")

  if isinstance(ast_node, Number):
    return ast_node
  elif isinstance(ast_node, Call):
    if ast_node.operator == ADD:
      return partial_eval_add(ast_node, debug)
    elif ast_node.operator == SUBTRACT:
      return partial_eval_sub(ast_node, debug)
    # read and uninterpreted operators stay exactly as written
    return ast_node
  elif isinstance(ast_node, Let):
    return partial_eval_let(ast_node, debug)
  elif isinstance(ast_node, Var):
    return ast_node
  raise TypeError(f"Not an Lvar expression: {ast_node!r}")


def partial_eval_args(args, debug: bool) -> List[Expression]:
  return [partial_eval_ast(arg, debug) for arg in args]


def partial_eval_add(ast_node: Call, debug: bool = False) -> Expression:
  """(+ a b ...): constants summed into one leading Number"""
  total, residual = split_constants(partial_eval_args(ast_node.args, debug))

  if not residual:
    return Number(total)
  return Call(ADD, tuple([Number(total)] + residual))


def partial_eval_sub(ast_node: Call, debug: bool = False) -> Expression:
  """(- m s1 s2 ...): minuend minus the sum of everything after it"""
  if not ast_node.args:
    return ast_node

  minuend = partial_eval_ast(ast_node.args[0], debug)
  total, residual = split_constants(partial_eval_args(ast_node.args[1:], debug))

  if isinstance(minuend, Number):
    if not residual:
      return Number(minuend.value - total)
    return Call(SUBTRACT, tuple([Number(minuend.value - total)] + residual))

  if not residual:
    return Call(SUBTRACT, (minuend, Number(total)))
  # Constant subtrahend total goes last, after the residual subtrahends
  return Call(SUBTRACT, tuple([minuend] + residual + [Number(total)]))


def partial_eval_let(ast_node: Let, debug: bool = False) -> Let:
  """Fold inside binding values and the body; names are not substituted"""
  bindings = tuple(
      Binding(binding.name, partial_eval_ast(binding.value, debug))
      for binding in ast_node.bindings
  )
  return Let(bindings, partial_eval_ast(ast_node.body, debug))


def partial_evaluate(expr: Expression, debug: bool = False) -> Expression:
  """Constant-fold expr; worst case the result equals the input"""
  return partial_eval_ast(expr, debug)


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

def create_partial_evaluator(debug: bool = False):
  """Factory function returning a partial evaluator"""
  return type('PartialEvaluator', (), {
      'reduce': lambda self, expr: partial_evaluate(expr, debug),
      'debug': debug
  })()


def create_debug_partial_evaluator():
  """Factory function returning a debug partial evaluator"""
  return create_partial_evaluator(debug=True)
