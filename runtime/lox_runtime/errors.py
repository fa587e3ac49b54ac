"""
Lox Errors - Error codes and exception hierarchy

Two independent failure tracks:
- Static: reported by the tokenizer, parser and resolver. Collected, never
  raised one at a time; their presence stops the tree from being run.
- Dynamic: raised by the interpreter. The first one aborts the whole
  top-level execution in progress.

Every error carries the token that triggered it (when there is one) so the
driver can attribute it to a source line.
"""

from typing import List, Optional

from .tokens import Token, TokenType


# ============================================================================
# Error Codes
# ============================================================================

E_SYNTAX_ERROR = "E_SYNTAX_ERROR"
E_PARSE_ERROR = "E_PARSE_ERROR"
E_RESOLVE_ERROR = "E_RESOLVE_ERROR"
E_RUNTIME_ERROR = "E_RUNTIME_ERROR"
E_NAME_ERROR = "E_NAME_ERROR"
E_TYPE_ERROR = "E_TYPE_ERROR"
E_ARITY_ERROR = "E_ARITY_ERROR"
E_STACK_OVERFLOW = "E_STACK_OVERFLOW"
E_INTERNAL_ERROR = "E_INTERNAL_ERROR"


class LoxError(Exception):
    """Base exception for Lox errors"""
    def __init__(self, code: str, message: str, token: Optional[Token] = None,
                 line: Optional[int] = None):
        self.code = code
        self.message = message
        self.token = token
        self._line = line
        super().__init__(f"[{code}] {message}")

    @property
    def line(self) -> Optional[int]:
        if self.token is not None:
            return self.token.line
        return self._line

    def report(self) -> str:
        """Format as `[line N] Error at 'x': message`"""
        where = ""
        if self.token is not None:
            if self.token.type == TokenType.EOF:
                where = " at end"
            else:
                where = f" at '{self.token.lexeme}'"
        prefix = f"[line {self.line}] " if self.line is not None else ""
        return f"{prefix}Error{where}: {self.message}"


class LoxInternalError(LoxError):
    """Broken interpreter invariant; never caused by user code"""
    def __init__(self, message: str, token: Optional[Token] = None):
        super().__init__(E_INTERNAL_ERROR, message, token)


# ============================================================================
# Static (front-end and resolution time)
# ============================================================================

class LoxSyntaxError(LoxError):
    """Unexpected character or unterminated literal in the source text"""
    def __init__(self, message: str, line: int):
        super().__init__(E_SYNTAX_ERROR, message, line=line)


class LoxParseError(LoxError):
    def __init__(self, token: Token, message: str):
        super().__init__(E_PARSE_ERROR, message, token)


class LoxResolveError(LoxError):
    def __init__(self, token: Optional[Token], message: str):
        super().__init__(E_RESOLVE_ERROR, message, token)


class DuplicateDeclaration(LoxResolveError):
    def __init__(self, token: Token):
        super().__init__(token, "Already a variable with this name in this scope.")


class SelfReferentialInitializer(LoxResolveError):
    def __init__(self, token: Token):
        super().__init__(token, "Can't read local variable in its own initializer.")


class ReturnOutsideFunction(LoxResolveError):
    def __init__(self, token: Token):
        super().__init__(token, "Can't return from top-level code.")


class ThisOutsideClass(LoxResolveError):
    def __init__(self, token: Token):
        super().__init__(token, "Can't use 'this' outside of a class.")


class NestingTooDeep(LoxResolveError):
    """Tree nested deeper than the host stack allows"""
    def __init__(self, token: Optional[Token] = None):
        super().__init__(token, "Too much nesting.")


class LoxStaticErrors(LoxError):
    """Raised by the runtime facade when any static stage reported errors"""
    def __init__(self, errors: List[LoxError]):
        self.errors = list(errors)
        code = self.errors[0].code if self.errors else E_RESOLVE_ERROR
        summary = "; ".join(e.report() for e in self.errors)
        super().__init__(code, summary)

    def report(self) -> str:
        return "\n".join(e.report() for e in self.errors)


# ============================================================================
# Dynamic (evaluation time)
# ============================================================================

class LoxRuntimeError(LoxError):
    def __init__(self, code: str, token: Optional[Token], message: str):
        super().__init__(code, message, token)

    def report(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message}\n[line {self.line}]"


class UndefinedVariable(LoxRuntimeError):
    def __init__(self, token: Token, message: Optional[str] = None):
        if message is None:
            message = f"Undefined variable '{token.lexeme}'."
        super().__init__(E_NAME_ERROR, token, message)


class UndefinedProperty(UndefinedVariable):
    def __init__(self, token: Token):
        super().__init__(token, f"Undefined property '{token.lexeme}'.")


class LoxTypeError(LoxRuntimeError):
    def __init__(self, token: Token, message: str):
        super().__init__(E_TYPE_ERROR, token, message)


class ArityMismatch(LoxRuntimeError):
    def __init__(self, token: Token, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(E_ARITY_ERROR, token,
                         f"Expected {expected} arguments but got {got}.")


class StackOverflow(LoxRuntimeError):
    def __init__(self, token: Optional[Token] = None):
        super().__init__(E_STACK_OVERFLOW, token, "Stack overflow.")


__all__ = [
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
