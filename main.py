"""
Lvar Programming Language - Main Entry Point
S-expression arithmetic with let bindings and an input primitive
"""

import sys
import argparse
import os
from typing import Optional, List

# Readline support for history in interactive mode
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import create_parser, LvarParseError
from visualizer import visualize, pretty_print_ast, pretty_print_tokens
from interpreter import create_interpreter, make_runtime_env
from partial_evaluator import create_partial_evaluator
from stdlib import make_scripted_line_source, list_builtin_operators, get_builtin_operator
from error_handling import LvarRuntimeError
from utilities import has_balanced_parens


VERSION = "Lvar v0.1.0"

DEMO_PROGRAM = "(let ((x 2) (y 3)) (let ((z (+ x y))) (+ z (read))))"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Lvar - S-expression arithmetic with let and read',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s                          # Run the built-in demo program
  %(prog)s script.lvar              # Run an Lvar script
  %(prog)s -e "(+ 2 (- 4 2))"       # Run an expression
  %(prog)s --partial -e "(+ 1 (read))"
  %(prog)s --input 5 script.lvar    # Answer read with 5
  %(prog)s -i                       # Interactive mode
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Lvar script file to execute'
  )

  parser.add_argument(
      '-e', '--expr',
      help='Expression to execute instead of a script file'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Show tokens and AST instead of evaluating'
  )

  parser.add_argument(
      '--partial',
      action='store_true',
      help='Constant-fold the program before evaluating it'
  )

  parser.add_argument(
      '--strict-arity',
      action='store_true',
      help='Require exactly two arguments for + and - and none for read'
  )

  parser.add_argument(
      '--input',
      action='append',
      metavar='LINE',
      help='Answer the next read with LINE instead of prompting (repeatable)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def read_program(args: argparse.Namespace) -> tuple:
  """Return (source_text, display_name) for the selected program"""
  if args.expr is not None:
    return args.expr, "<expr>"
  if args.script:
    with open(args.script, 'r', encoding='utf-8') as f:
      return f.read(), args.script
  return DEMO_PROGRAM, "<demo>"


def run_program(source: str, name: str, args: argparse.Namespace) -> None:
  """Parse, optionally fold, print and evaluate one program"""
  if not has_balanced_parens(source):
    print("Unbalanced parens!!!")

  parser = create_parser(args.debug, args.strict_arity)

  if args.parse:
    tokens = parser.tokenize(source, name)
    print("Tokens:")
    print(pretty_print_tokens(tokens))
    ast = parser.parse_string(source, name)
    print("\nAST:")
    print(pretty_print_ast(ast), end='')
    return

  ast = parser.parse_string(source, name)
  print(f"AST: {visualize(ast)}")

  if args.partial:
    ast = create_partial_evaluator(args.debug).reduce(ast)
    print(f"Partially evaluated AST: {visualize(ast)}")

  line_source = make_scripted_line_source(args.input) if args.input else None
  interpreter = create_interpreter(args.debug, line_source)
  result = interpreter.evaluate(ast)
  print(result)


def run_script(args: argparse.Namespace) -> None:
  """Run the selected program and exit with status 1 on any error"""
  try:
    source, name = read_program(args)
    run_program(source, name, args)
  except FileNotFoundError:
    print(f"Error: Script file '{args.script}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{args.script}'")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{args.script}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)
  except LvarParseError as e:
    print(str(e))
    sys.exit(1)
  except LvarRuntimeError as e:
    print(f"Runtime error: {e.message}")
    sys.exit(1)


def setup_readline():
  """Setup readline with history"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser("~/.lvar_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet

  readline.set_history_length(1000)

  import atexit
  atexit.register(lambda: readline.write_history_file(history_file))


def run_interactive_mode(args: argparse.Namespace) -> None:
  """Read-eval-print loop; bindings persist across entries of the session"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit.' to quit, ':help' for commands")
  if args.debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_parser(args.debug, args.strict_arity)
  folder = create_partial_evaluator(args.debug)
  line_source = make_scripted_line_source(args.input) if args.input else None
  interpreter = create_interpreter(args.debug, line_source)
  session_env = make_runtime_env()

  while True:
    try:
      code = input("lvar> ")

      if code.strip() == "exit.":
        break

      if not code.strip():
        continue

      if code.strip() == ":help":
        print("REPL Commands:")
        print("  :parse <expr>     - Show parsed AST")
        print("  :partial <expr>   - Show constant-folded expression")
        print("  :env              - Show bindings made so far")
        print("  :help             - Show this help")
        print("  exit.             - Exit REPL")
        print()
        print("Built-in operators:")
        for name in list_builtin_operators():
          print(f"  {name:<6} {get_builtin_operator(name)['type_signature']}")
        continue

      if code.strip() == ":env":
        if session_env:
          for name, value in session_env.items():
            print(f"  {name} = {value}")
        else:
          print("  (no bindings)")
        continue

      try:
        if code.startswith(":parse "):
          print(pretty_print_ast(parser.parse_string(code[7:])), end='')
          continue

        if code.startswith(":partial "):
          print(visualize(folder.reduce(parser.parse_string(code[9:]))))
          continue

        ast = parser.parse_string(code)
        print(f"=> {interpreter.eval_with_env(ast, session_env)}")
      except LvarParseError as e:
        print(str(e))
      except LvarRuntimeError as e:
        print(f"Runtime error: {e.message}")

    except KeyboardInterrupt:
      print("\nGoodbye!")
      break
    except EOFError:
      print("\nGoodbye!")
      break


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Lvar"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.interactive:
    run_interactive_mode(args)
  else:
    run_script(args)


if __name__ == "__main__":
  main()
