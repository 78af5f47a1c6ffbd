"""
Tern Programming Language - Main Entry Point
Command line front end: script runner, parse dump and interactive REPL
"""

import sys
import argparse
import os
from pathlib import Path
from typing import Dict, Optional

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import parse, parse_program, pretty_print_ast, BindingDefinition, FunctionDefinition
from interpreter import evaluate, eval_program
from environment import make_environment, iter_bindings, iter_functions
from stdlib import format_value
from error_handling import (
  TernParseError,
  TernRuntimeError,
  format_parse_error,
  format_runtime_error
)


VERSION = "Tern v0.1.0"
PROMPT = "tern> "
CONTINUATION_PROMPT = "....> "
HISTORY_FILE = "~/.tern_history"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='Tern - a small expression-oriented language',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.tern            # Run a Tern script
  %(prog)s -i                     # Interactive mode
  %(prog)s --parse script.tern    # Parse and show the AST
  %(prog)s --debug script.tern    # Run with debug output
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Tern script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the AST (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


def read_script(script_path: str) -> Optional[str]:
  """Read a script, reporting I/O problems instead of raising"""
  try:
    return Path(script_path).read_text(encoding='utf-8')
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print(f"  Hint: Make sure you have read permissions for this file")
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
  return None


def parse_file(script_path: str, debug: bool = False) -> int:
  """Parse a script and print its statements; returns the exit status"""
  source = read_script(script_path)
  if source is None:
    return 1

  try:
    statements = parse_program(source)
  except TernParseError as e:
    print(f"Error in '{script_path}':")
    print(format_parse_error(e, source))
    return 1

  print(f"Parsed {len(statements)} top-level statements:")
  print("=" * 50)
  for i, stmt in enumerate(statements, 1):
    print(f"\nStatement {i}:")
    print(pretty_print_ast(stmt), end='')
  return 0


def run_script_file(script_path: str, debug: bool = False) -> int:
  """Run a script, printing the value of every expression statement"""
  source = read_script(script_path)
  if source is None:
    return 1

  try:
    statements = parse_program(source)
    if debug:
      print(f"Parsed {len(statements)} statements")
    env, results = eval_program(statements, make_environment(), debug)
  except TernParseError as e:
    print(f"Error in '{script_path}':")
    print(format_parse_error(e, source))
    return 1
  except TernRuntimeError as e:
    print(f"Error in '{script_path}':")
    print(format_runtime_error(e))
    return 1

  for _, value in results:
    if value is not None:
      print(format_value(value))

  if debug:
    print(f"\nFinal environment:")
    show_environment(env)
  return 0


def show_environment(env: Dict) -> None:
  """Print every binding and function visible from `env`"""
  bindings = sorted(iter_bindings(env))
  functions = sorted(iter_functions(env))
  if not bindings and not functions:
    print("  (no user-defined bindings)")
    return

  for name, value in bindings:
    print(f"  {name} = {format_value(value)}")
  for name, func in functions:
    params = " ".join(func['params'])
    print(f"  fn {name} {params}".rstrip())


def show_help() -> None:
  print("REPL Commands:")
  print("  :parse <stmt>     - Show parsed AST")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  let x = 5                 - Value binding")
  print("  fn add x y => x + y       - Function definition")
  print("  add 1 2                   - Function call")
  print("  { let a = 1\\n a + 1 }     - Block, value of its last expression")


def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  completions = ["let", "fn", ":parse", ":env", ":help", "exit"]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(lambda: readline.write_history_file(history_file))


def read_statement(input_func=input) -> str:
  """Read one statement, continuing onto further lines while braces are open"""
  code = input_func(PROMPT)
  while code.count("{") > code.count("}"):
    code += "\n" + input_func(CONTINUATION_PROMPT)
  return code


def run_line(code: str, env: Dict, debug: bool = False) -> Dict:
  """Parse and evaluate one REPL entry, returning the environment to keep.

  Errors are reported and leave the environment as it was.
  """
  try:
    stmt = parse(code)
    if debug:
      print(pretty_print_ast(stmt), end='')
    value, new_env = evaluate(stmt, env, debug)
  except TernParseError as e:
    print(format_parse_error(e, code))
    return env
  except TernRuntimeError as e:
    print(format_runtime_error(e))
    return env

  if isinstance(stmt, BindingDefinition):
    print(f"Bound: {stmt.name} = {format_value(new_env['bindings'][stmt.name])}")
  elif isinstance(stmt, FunctionDefinition):
    print(f"Defined function: {stmt.name}")
  elif value is not None:
    print(f"=> {format_value(value)}")
  return new_env


def run_interactive_mode(debug: bool = False, input_func=input) -> None:
  """Run Tern in interactive mode; one root environment lives for the session"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  if input_func is input:
    setup_readline()

  session_env = make_environment()

  while True:
    try:
      code = read_statement(input_func)
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    stripped = code.strip()
    if stripped == "exit":
      break
    if not stripped:
      continue

    if stripped.startswith(":parse "):
      stmt_text = stripped[len(":parse "):]
      try:
        print(pretty_print_ast(parse(stmt_text)), end='')
      except TernParseError as e:
        print(format_parse_error(e, stmt_text))
      continue

    if stripped == ":env":
      print("Current environment:")
      show_environment(session_env)
      continue

    if stripped == ":help":
      show_help()
      continue

    session_env = run_line(code, session_env, debug)


def main() -> None:
  """Main entry point for Tern"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args()

  if args.script:
    if args.parse:
      sys.exit(parse_file(args.script, debug=args.debug))
    sys.exit(run_script_file(args.script, debug=args.debug))

  if args.interactive or len(sys.argv) == 1 or args.debug:
    run_interactive_mode(debug=args.debug)
  else:
    arg_parser.print_help()


if __name__ == "__main__":
  main()
