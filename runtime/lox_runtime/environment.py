"""
Lox Environment - Chained variable scopes

Each scope maps names to values and points at its enclosing scope (the
global scope has none). Scopes are ordinary Python objects: a scope stays
alive for as long as any closure or running call frame still references it.
"""

from typing import Any, Dict, Optional

from .errors import LoxInternalError, UndefinedVariable
from .tokens import Token


class Environment:
    """One lexical scope plus a link to its parent"""

    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any):
        """Bind name in this scope, overwriting any existing binding"""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """Look name up along the chain, innermost first"""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise UndefinedVariable(name)

    def assign(self, name: Token, value: Any):
        """Overwrite the nearest existing binding; never creates one"""
        env = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise UndefinedVariable(name)

    def ancestor(self, distance: int) -> 'Environment':
        env = self
        for _ in range(distance):
            if env.enclosing is None:
                raise LoxInternalError(f"No scope {distance} levels out")
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: Token) -> Any:
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise LoxInternalError(
                f"Resolved variable '{name.lexeme}' missing at distance {distance}", name)
        return values[name.lexeme]

    def assign_at(self, distance: int, name: Token, value: Any):
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise LoxInternalError(
                f"Resolved variable '{name.lexeme}' missing at distance {distance}", name)
        values[name.lexeme] = value

    def depth(self) -> int:
        """Number of parent links between this scope and the global scope"""
        count = 0
        env = self.enclosing
        while env is not None:
            count += 1
            env = env.enclosing
        return count

    def __repr__(self) -> str:
        return f"Environment(depth={self.depth()}, names={sorted(self.values)})"


__all__ = ['Environment']
