"""
Lvar Interpreter
Reduces an expression tree to an integer
One mutable environment is threaded through the whole evaluation of a
top-level expression; read is the only side effect and goes through the
line source held by the execution context
"""

from typing import Dict, Optional

from expressions import Number, Call, Let, Var, Expression, node_label
from parsing import create_parser
from error_handling import UnboundVariableError
from utilities import validate_arity
from stdlib import (
    DEFAULT_PROMPT,
    UNKNOWN_CALL_VALUE,
    LineSource,
    console_line_source,
    get_builtin_operator,
)


# ============================================================================
# DATA STRUCTURES
# ============================================================================

def make_runtime_env(bindings: Optional[Dict[str, int]] = None) -> Dict[str, int]:
  """Create the environment for one top-level evaluation"""
  return dict(bindings or {})


def make_execution_context(line_source: Optional[LineSource] = None,
                           prompt: str = DEFAULT_PROMPT,
                           debug: bool = False) -> Dict:
  """Create an execution context holding the read capability"""
  return {
      'line_source': line_source or console_line_source,
      'prompt': prompt,
      'debug': debug
  }


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def env_bind_value(env: Dict[str, int], name: str, value: int) -> None:
  """Bind name in place; the binding is never removed during this evaluation"""
  env[name] = value


def env_lookup_value(env: Dict[str, int], name: str) -> int:
  if name not in env:
    raise UnboundVariableError(name)
  return env[name]


# ============================================================================
# EVALUATION FUNCTIONS
# ============================================================================

def eval_ast(ast_node: Expression, env: Dict[str, int], context: Optional[Dict] = None) -> int:
  """
  Evaluate an expression with a shared mutable environment.
  Arguments are evaluated left to right so read prompts appear in source order.
  """
  if context is None:
    context = make_execution_context()

  if context['debug']:
    print(f"Evaluating: {node_label(ast_node)}")

  if isinstance(ast_node, Number):
    return eval_number(ast_node, env, context)
  elif isinstance(ast_node, Call):
    return eval_call(ast_node, env, context)
  elif isinstance(ast_node, Let):
    return eval_let(ast_node, env, context)
  elif isinstance(ast_node, Var):
    return eval_var(ast_node, env, context)
  raise TypeError(f"Not an Lvar expression: {ast_node!r}")


def eval_number(ast_node: Number, env: Dict[str, int], context: Dict) -> int:
  """Evaluate number literal"""
  return ast_node.value


def eval_call(ast_node: Call, env: Dict[str, int], context: Dict) -> int:
  """Evaluate an operator application"""
  builtin = get_builtin_operator(ast_node.operator)

  if builtin is None:
    # Uninterpreted call: arguments are left alone
    if context['debug']:
      print(f"Unknown operator '{ast_node.operator}', using {UNKNOWN_CALL_VALUE}")
    return UNKNOWN_CALL_VALUE

  validate_arity(builtin['name'], ast_node.args, builtin['min_args'], builtin['max_args'])

  if builtin['effectful']:
    return builtin['func'](context)

  values = [eval_ast(arg, env, context) for arg in ast_node.args]
  return builtin['func'](values)


def eval_let(ast_node: Let, env: Dict[str, int], context: Dict) -> int:
  """Evaluate bindings in order into the shared environment, then the body"""
  for binding in ast_node.bindings:
    value = eval_ast(binding.value, env, context)
    env_bind_value(env, binding.name, value)
    if context['debug']:
      print(f"Bound: {binding.name} = {value}")

  return eval_ast(ast_node.body, env, context)


def eval_var(ast_node: Var, env: Dict[str, int], context: Dict) -> int:
  """Evaluate a variable reference by environment lookup"""
  return env_lookup_value(env, ast_node.name)


# ============================================================================
# PROGRAM EVALUATION
# ============================================================================

def evaluate(expr: Expression, line_source: Optional[LineSource] = None,
             debug: bool = False, prompt: str = DEFAULT_PROMPT) -> int:
  """Evaluate a top-level expression with a fresh environment"""
  env = make_runtime_env()
  context = make_execution_context(line_source, prompt, debug)
  return eval_ast(expr, env, context)


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

def create_interpreter(debug: bool = False, line_source: Optional[LineSource] = None,
                       prompt: str = DEFAULT_PROMPT):
  """Factory function returning an interpreter"""
  def evaluate_expr(expr):
    return evaluate(expr, line_source, debug, prompt)

  def evaluate_source(text, strict_arity=False):
    parser = create_parser(debug, strict_arity)
    return evaluate_expr(parser.parse_string(text))

  def eval_with_env(expr, env):
    """Evaluate against a caller-owned environment (REPL sessions)"""
    return eval_ast(expr, env, make_execution_context(line_source, prompt, debug))

  return type('Interpreter', (), {
      'evaluate': lambda self, expr: evaluate_expr(expr),
      'evaluate_source': lambda self, text, strict_arity=False: evaluate_source(text, strict_arity),
      'eval_with_env': lambda self, expr, env: eval_with_env(expr, env),
      'debug': debug
  })()


def create_debug_interpreter(line_source: Optional[LineSource] = None):
  """Factory function returning a debug interpreter"""
  return create_interpreter(debug=True, line_source=line_source)
