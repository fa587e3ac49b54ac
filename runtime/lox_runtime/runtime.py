"""
Lox Runtime - Source-to-output pipeline

    source -> LoxTokenizer -> LoxParser -> Resolver -> Interpreter

Each stage's static errors are checked before the next stage runs; any of
them raises `LoxStaticErrors` and nothing is executed. A runtime error
stops the run at the failing statement and propagates unchanged.

The global scope survives between `execute` calls, so a runtime can be
driven one line at a time (the REPL does this).

Example:
    >>> runtime = LoxRuntime(output=lines.append)
    >>> runtime.execute('var greeting = "hi"; print greeting;')
    >>> lines
    ['hi']
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from . import ast_nodes as ast
from .errors import LoxError, LoxParseError, LoxRuntimeError, LoxStaticErrors, NestingTooDeep
from .interpreter import Interpreter
from .parser import LoxParser
from .resolver import Resolver
from .tokenizer import LoxTokenizer
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


class LoxRuntime:
    """Main Lox runtime interface"""

    def __init__(self, output: Optional[Callable[[str], Any]] = None,
                 clock: Optional[Callable[[], float]] = None):
        self._output = output
        self._clock = clock
        self.interpreter = Interpreter(output=output, clock=clock)

    def parse(self, source: str) -> List[ast.Stmt]:
        """Tokenize and parse source, raising LoxStaticErrors on any error"""
        tokenizer = LoxTokenizer(source)
        tokens = tokenizer.tokenize()

        parser = LoxParser(tokens)
        try:
            statements = parser.parse()
        except RecursionError:
            raise LoxStaticErrors([LoxParseError(parser._peek(), "Too much nesting.")]) from None

        errors: List[LoxError] = list(tokenizer.errors) + list(parser.errors)
        if errors:
            logger.debug("Front end reported %d errors", len(errors))
            raise LoxStaticErrors(errors)
        return statements

    def parse_line(self, source: str) -> List[ast.Stmt]:
        """
        Parse one line of interactive input.

        A line holding a single bare expression becomes a `print` of that
        expression; anything else is parsed as ordinary statements.
        """
        tokenizer = LoxTokenizer(source)
        tokens = tokenizer.tokenize()
        if not tokenizer.errors:
            parser = LoxParser(tokens)
            try:
                expr = parser.parse_expression()
            except RecursionError:
                expr = None
            if expr is not None:
                return [ast.Print(expression=expr)]
        return self.parse(source)

    def execute(self, source: str):
        """Execute Lox source code"""
        statements = self.parse(source)
        self.run(statements)

    def execute_line(self, source: str):
        """Execute one line of interactive input, echoing a bare expression"""
        self.run(self.parse_line(source))

    def run(self, statements: List[ast.Stmt]):
        """Resolve and interpret an already parsed program"""
        try:
            result = Resolver().resolve(statements)
        except RecursionError:
            raise LoxStaticErrors([NestingTooDeep()]) from None
        if result.failed:
            logger.debug("Resolver reported %d errors", len(result.errors))
            raise LoxStaticErrors(result.errors)

        try:
            self.interpreter.interpret(statements, result.table)
        except LoxRuntimeError as e:
            logger.debug("Runtime error on line %s: %s", e.line, e.message)
            raise

    def execute_file(self, filepath: str):
        """Execute a Lox source file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            source = f.read()
        self.execute(source)

    def set_var(self, name: str, value: Any):
        """Define a global variable"""
        self.interpreter.globals.define(name, value)

    def get_var(self, name: str) -> Any:
        """Read a global variable; raises UndefinedVariable if missing"""
        return self.interpreter.globals.get(Token(TokenType.IDENTIFIER, name, None, 0))

    def get_env(self) -> Dict[str, Any]:
        """Copy of the global scope"""
        return self.interpreter.globals.values.copy()

    def clear_env(self):
        """Start over with a fresh global scope (keeping natives)"""
        self.interpreter = Interpreter(output=self._output, clock=self._clock)


# ============================================================================
# Convenience Function
# ============================================================================

def execute_lox(source: str) -> List[str]:
    """
    Execute Lox source code and return the printed lines

    Example:
        >>> execute_lox('print 1 + 2;')
        ['3']
    """
    lines: List[str] = []
    runtime = LoxRuntime(output=lines.append)
    runtime.execute(source)
    return lines


__all__ = ['LoxRuntime', 'execute_lox']
