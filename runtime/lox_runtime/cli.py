"""
Lox command line driver

    lox script.lox        run a file
    lox -c 'print 1;'     run a string
    lox                   interactive prompt

Exit codes: 65 for syntax/resolution errors, 70 for runtime errors.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .errors import LoxRuntimeError, LoxStaticErrors
from .printer import AstPrinter
from .runtime import LoxRuntime

EXIT_STATIC_ERROR = 65
EXIT_RUNTIME_ERROR = 70


def print_tree(statements):
    try:
        print(AstPrinter().print_program(statements))
    except RecursionError:
        print("(tree too deep to print)")


def run_source(runtime: LoxRuntime, source: str, print_ast: bool = False,
               interactive: bool = False) -> int:
    """Run one chunk of source, reporting errors to stderr.

    With interactive set, a bare expression is evaluated and its value printed.
    """
    parse = runtime.parse_line if interactive else runtime.parse
    try:
        statements = parse(source)
        if print_ast:
            print_tree(statements)
        runtime.run(statements)
    except LoxStaticErrors as e:
        print(e.report(), file=sys.stderr)
        return EXIT_STATIC_ERROR
    except LoxRuntimeError as e:
        print(e.report(), file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    return 0


def run_prompt(runtime: LoxRuntime, print_ast: bool = False):
    """Read-eval-print loop; errors are reported and the session continues"""
    while True:
        try:
            line = input("> ")
        except EOFError:
            print()
            break
        run_source(runtime, line, print_ast, interactive=True)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run Lox programs.")
    parser.add_argument("script", nargs="?", help="Path to a Lox source file.")
    parser.add_argument("-c", "--command", help="Program passed in as a string.")
    parser.add_argument("--print-ast", action="store_true", help="Print the parsed tree before running.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    runtime = LoxRuntime()

    if args.command is not None:
        return run_source(runtime, args.command, args.print_ast)

    if args.script is not None:
        try:
            with open(args.script, 'r', encoding='utf-8') as f:
                source = f.read()
        except OSError as e:
            print(f"Error: cannot read '{args.script}': {e.strerror}", file=sys.stderr)
            return 1
        return run_source(runtime, source, args.print_ast)

    run_prompt(runtime, args.print_ast)
    return 0


if __name__ == "__main__":
    sys.exit(main())
