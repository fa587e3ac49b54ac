"""
Lox Runtime - Tree-walking interpreter for the Lox scripting language

**Pipeline:**
- Tokenizer: source text to tokens
- Parser: tokens to statements
- Resolver: static scope distances for every variable reference
- Interpreter: executes the resolved tree

**Runtime objects:**
- Environment: chained scopes shared by closures and running calls
- LoxFunction, LoxClass, LoxInstance, NativeFunction

Version: 1.0.0
"""

import logging

__version__ = '1.0.0'

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ============================================================================
# Front End
# ============================================================================

from .tokens import Token, TokenType
from .tokenizer import LoxTokenizer
from .parser import LoxParser
from .printer import AstPrinter

# ============================================================================
# Core
# ============================================================================

from .environment import Environment
from .control import Unwind
from .callables import LoxCallable, NativeFunction, LoxFunction, LoxClass, LoxInstance
from .resolver import Resolver, ResolutionTable, ResolutionResult, resolve
from .interpreter import Interpreter, is_truthy, is_equal, stringify
from .runtime import LoxRuntime, execute_lox

# ============================================================================
# Errors
# ============================================================================

from .errors import (
    E_SYNTAX_ERROR, E_PARSE_ERROR, E_RESOLVE_ERROR, E_RUNTIME_ERROR,
    E_NAME_ERROR, E_TYPE_ERROR, E_ARITY_ERROR, E_STACK_OVERFLOW,
    E_INTERNAL_ERROR,
    LoxError, LoxInternalError,
    LoxSyntaxError, LoxParseError, LoxResolveError,
    DuplicateDeclaration, SelfReferentialInitializer,
    ReturnOutsideFunction, ThisOutsideClass, NestingTooDeep, LoxStaticErrors,
    LoxRuntimeError, UndefinedVariable, UndefinedProperty,
    LoxTypeError, ArityMismatch, StackOverflow,
)

# ============================================================================
# Exports
# ============================================================================

__all__ = [
    '__version__',

    # Front end
    'Token', 'TokenType', 'LoxTokenizer', 'LoxParser', 'AstPrinter',

    # Core
    'Environment', 'Unwind',
    'LoxCallable', 'NativeFunction', 'LoxFunction', 'LoxClass', 'LoxInstance',
    'Resolver', 'ResolutionTable', 'ResolutionResult', 'resolve',
    'Interpreter', 'is_truthy', 'is_equal', 'stringify',
    'LoxRuntime', 'execute_lox',

    # Errors
    'E_SYNTAX_ERROR', 'E_PARSE_ERROR', 'E_RESOLVE_ERROR', 'E_RUNTIME_ERROR',
    'E_NAME_ERROR', 'E_TYPE_ERROR', 'E_ARITY_ERROR', 'E_STACK_OVERFLOW',
    'E_INTERNAL_ERROR',
    'LoxError', 'LoxInternalError',
    'LoxSyntaxError', 'LoxParseError', 'LoxResolveError',
    'DuplicateDeclaration', 'SelfReferentialInitializer',
    'ReturnOutsideFunction', 'ThisOutsideClass', 'NestingTooDeep',
    'LoxStaticErrors',
    'LoxRuntimeError', 'UndefinedVariable', 'UndefinedProperty',
    'LoxTypeError', 'ArityMismatch', 'StackOverflow',
]
