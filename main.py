"""
Ember Programming Language - Main Entry Point
Runs scripts, dumps tokens or syntax trees, and hosts the interactive REPL
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from ast_nodes import ExpressionStmt, pretty_print_ast, render, render_program
from error_handling import EmberParseError, EmberRuntimeError, EmberTokenizerError, get_context_lines
from interpreter import Interpreter, create_debug_interpreter, create_interpreter
from lexing import describe_token, tokenize_source
from parsing import DEFAULT_MAX_DEPTH, create_debug_parser, create_parser
from stdlib import show


VERSION = "Ember v0.1.0"
HISTORY_FILE = "~/.ember_history"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='ember',
      description='Ember - a small expression and statement language',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.ember            # Run an Ember script
  %(prog)s -i                      # Interactive mode
  %(prog)s --tokens script.ember   # Show the token stream
  %(prog)s --parse script.ember    # Parse and show the syntax tree
  %(prog)s --debug script.ember    # Run with debug output
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Ember script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--tokens',
      action='store_true',
      help='Tokenize file and show tokens (for debugging)'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the syntax tree (for debugging)'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--max-depth',
      type=int,
      default=DEFAULT_MAX_DEPTH,
      metavar='N',
      help=f'Maximum expression nesting depth (default: {DEFAULT_MAX_DEPTH})'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


# ============================================================================
# ERROR REPORTING
# ============================================================================

def report_tokenizer_error(e: EmberTokenizerError, source: str, script_path: str) -> None:
  print(f"Syntax error in '{script_path}' at line {e.line}, column {e.column}: {e.message}")
  print(get_context_lines(source, e.line, e.column))


def report_parse_error(e: EmberParseError, source: str, script_path: str) -> None:
  count = len(e.errors)
  print(f"Parse error in '{script_path}' ({count} error{'s' if count != 1 else ''}):")
  print(e.format(source, script_path))


def report_runtime_error(e: EmberRuntimeError, source: str, script_path: str) -> None:
  print(f"\n{'='*70}")
  print(f"Runtime Error in '{script_path}'")
  print(f"{'='*70}")
  print(f"\nError: {e.message}")

  if e.token is not None:
    print(f"\nLocation: line {e.token.line}")
    print(get_context_lines(source, e.token.line, e.token.column, context_lines=0))

  print(f"\n{'='*70}\n")


def read_script(script_path: str) -> str:
  """Read a script, exiting with a hint when it cannot be read"""
  try:
    return Path(script_path).read_text(encoding='utf-8')
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print(f"  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    print(f"  Hint: Make sure you have read permissions for this file")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print(f"  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)


# ============================================================================
# FILE MODES
# ============================================================================

def tokenize_file(script_path: str) -> None:
  """Tokenize an Ember script file and show the tokens"""
  source = read_script(script_path)
  try:
    tokens = tokenize_source(source, script_path)
  except EmberTokenizerError as e:
    report_tokenizer_error(e, source, script_path)
    sys.exit(1)

  print(f"{len(tokens)} tokens:")
  for token in tokens:
    print(describe_token(token))


def parse_file(script_path: str, debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
  """Parse an Ember script file and show the syntax tree"""
  source = read_script(script_path)
  try:
    tokens = tokenize_source(source, script_path)
    parser = create_debug_parser(tokens, max_depth) if debug else create_parser(tokens, max_depth=max_depth)
    statements = parser.parse()
  except EmberTokenizerError as e:
    report_tokenizer_error(e, source, script_path)
    sys.exit(1)
  except EmberParseError as e:
    report_parse_error(e, source, script_path)
    sys.exit(1)

  print(f"Parsed {len(statements)} statements:")
  print("=" * 50)
  print(render_program(statements))

  for i, stmt in enumerate(statements, 1):
    print(f"\nStatement {i}:")
    print(pretty_print_ast(stmt), end='')


def run_script_file(script_path: str, debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
  """Run an Ember script file"""
  source = read_script(script_path)
  try:
    tokens = tokenize_source(source, script_path)
    if debug:
      print(f"Tokenized {script_path}: {len(tokens)} tokens")

    parser = create_debug_parser(tokens, max_depth) if debug else create_parser(tokens, max_depth=max_depth)
    statements = parser.parse()

    interpreter = create_debug_interpreter() if debug else create_interpreter()
    interpreter.interpret(statements)

  except EmberTokenizerError as e:
    report_tokenizer_error(e, source, script_path)
    sys.exit(1)
  except EmberParseError as e:
    report_parse_error(e, source, script_path)
    sys.exit(1)
  except EmberRuntimeError as e:
    report_runtime_error(e, source, script_path)
    sys.exit(1)
  except Exception as e:
    print(f"Unexpected error while executing '{script_path}': {e}")
    if debug:
      import traceback
      traceback.print_exc()
    sys.exit(1)


# ============================================================================
# INTERACTIVE MODE
# ============================================================================

REPL_COMPLETIONS = [
    # Keywords
    "let", "print", "true", "false", "null",
    # REPL commands
    ":parse", ":tokens", ":env", ":help", "exit",
]


def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First run, no history yet

  readline.set_history_length(1000)

  def completer(text, state):
    options = [cmd for cmd in REPL_COMPLETIONS if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def print_repl_help() -> None:
  print("REPL Commands:")
  print("  :parse <expr>     - Show the syntax tree of an expression")
  print("  :tokens <source>  - Show the tokens of a line")
  print("  :env              - Show current environment")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language features:")
  print("  let x = 5;                - Variable declaration")
  print("  x = x + 1;                - Assignment (variable must exist)")
  print("  print \"a\" + \"b\";          - Print a value")
  print("  1 + 2 * 3                 - Expression (';' is optional here)")


def handle_repl_line(code: str, interpreter: Interpreter, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
  """Run one REPL line; returns False when the session should end"""
  stripped = code.strip()

  if stripped in ("exit", "exit;", "quit"):
    return False

  if not stripped:
    return True

  if stripped.startswith(":parse "):
    try:
      parser = create_parser(tokenize_source(stripped[7:], "<repl>"), max_depth=max_depth)
      expr = parser.parse_expression()
      print(render(expr))
      print(pretty_print_ast(expr), end='')
    except EmberTokenizerError as e:
      print(f"Syntax error: {e.message}")
    except EmberParseError as e:
      print(f"Parse error: {e}")
    return True

  if stripped.startswith(":tokens "):
    try:
      for token in tokenize_source(stripped[8:], "<repl>"):
        print(describe_token(token))
    except EmberTokenizerError as e:
      print(f"Syntax error: {e.message}")
    return True

  if stripped == ":env":
    print("Current environment:")
    bindings = interpreter.environment.snapshot()
    if bindings:
      for name, value in bindings.items():
        val_str = show(value)
        if len(val_str) > 60:
          val_str = val_str[:57] + "..."
        print(f"  {name} = {val_str}")
    else:
      print("  (no bindings)")
    return True

  if stripped == ":help":
    print_repl_help()
    return True

  if not stripped.endswith(';'):
    stripped += ';'

  try:
    tokens = tokenize_source(stripped, "<repl>")
    parser = create_debug_parser(tokens, max_depth) if interpreter.debug else create_parser(tokens, max_depth=max_depth)
    for stmt in parser.parse():
      if isinstance(stmt, ExpressionStmt):
        print(f"=> {show(interpreter.evaluate(stmt.expression))}")
      else:
        interpreter.execute(stmt)
  except EmberTokenizerError as e:
    print(f"Syntax error: {e.message}")
  except EmberParseError as e:
    print(f"Parse error: {e}")
  except EmberRuntimeError as e:
    print(f"Runtime error: {e.message}")

  return True


def run_interactive_mode(debug: bool = False, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
  """Run Ember in interactive mode with a persistent environment"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if READLINE_AVAILABLE:
    print("Readline enabled: Use ↑/↓ for history, Tab for completion")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  while True:
    try:
      code = input("ember> ")
      if not handle_repl_line(code, interpreter, max_depth):
        break
    except KeyboardInterrupt:
      print("\nGoodbye!")
      break
    except EOFError:
      print("\nGoodbye!")
      break
    except Exception as e:
      print(f"Unexpected error: {e}")
      if debug:
        import traceback
        traceback.print_exc()


def show_language_info() -> None:
  """Show Ember language information"""
  print("Ember Programming Language")
  print("=" * 50)
  print("A small dynamically typed language with:")
  print("• Numbers, strings, booleans and null")
  print("• Arithmetic, comparison and equality operators")
  print("• Global variables with let and assignment")
  print("• print statements")
  print()


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Ember"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  if args.max_depth < 1:
    arg_parser.error("--max-depth must be at least 1")

  if args.script:
    if not Path(args.script).exists():
      print(f"Error: Script file '{args.script}' does not exist")
      sys.exit(1)

    if args.tokens:
      tokenize_file(args.script)
    elif args.parse:
      parse_file(args.script, debug=args.debug, max_depth=args.max_depth)
    else:
      run_script_file(args.script, debug=args.debug, max_depth=args.max_depth)

  else:
    if not args.interactive:
      show_language_info()
    run_interactive_mode(debug=args.debug, max_depth=args.max_depth)


if __name__ == "__main__":
  main()
