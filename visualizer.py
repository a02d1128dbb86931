"""
Lvar AST printer
Reconstructs canonical source text from an expression tree
"""

from typing import List

from expressions import Number, Call, Let, Var, Binding, Expression


def visualize(expr: Expression) -> str:
  """Fully parenthesized canonical source text for expr"""
  if isinstance(expr, Number):
    return str(expr.value)
  elif isinstance(expr, Call):
    parts = [expr.operator] + [visualize(arg) for arg in expr.args]
    return f"({' '.join(parts)})"
  elif isinstance(expr, Let):
    bindings = " ".join(visualize_binding(b) for b in expr.bindings)
    return f"(let ({bindings}) {visualize(expr.body)})"
  elif isinstance(expr, Var):
    return expr.name
  raise TypeError(f"Not an Lvar expression: {expr!r}")


def visualize_binding(binding: Binding) -> str:
  return f"({binding.name} {visualize(binding.value)})"


def pretty_print_ast(expr: Expression, indent: int = 0) -> str:
  """Pretty print an expression tree for debugging"""
  pad = "  " * indent
  if isinstance(expr, Number):
    return f"{pad}Number({expr.value})\n"
  elif isinstance(expr, Var):
    return f"{pad}Var({expr.name})\n"
  elif isinstance(expr, Call):
    result = f"{pad}Call({expr.operator!r})\n"
    for arg in expr.args:
      result += pretty_print_ast(arg, indent + 1)
    return result
  elif isinstance(expr, Let):
    result = f"{pad}Let\n"
    for binding in expr.bindings:
      result += f"{pad}  Binding({binding.name!r})\n"
      result += pretty_print_ast(binding.value, indent + 2)
    result += f"{pad}  Body\n"
    result += pretty_print_ast(expr.body, indent + 2)
    return result
  raise TypeError(f"Not an Lvar expression: {expr!r}")


def pretty_print_tokens(tokens: List) -> str:
  """One token per line with its source position"""
  lines = []
  for token in tokens:
    where = f"{token.span.start_line}:{token.span.start_col}" if token.span else "?"
    lines.append(f"{where:>8}  {token}")
  return "\n".join(lines)
