"""
Lox Resolver - Static scope analysis

One pass over the tree before anything runs. For every variable reference
(and every `this`) it records how many scopes out the declaration lives, so
the interpreter can jump straight to the right scope instead of searching.
References that match no local scope get no entry and are looked up in the
global scope at runtime.

Each local scope maps a name to False (declared, initializer still being
resolved) or True (defined). The split is what catches `var a = a;`.

Problems are collected, not raised. Resolution always covers the whole
tree; `ResolutionResult.failed` tells the caller not to run it.
"""

import logging
from typing import Dict, Iterator, List, Optional, Union
from dataclasses import dataclass, field

from . import ast_nodes as ast
from .errors import (
    LoxInternalError, LoxResolveError, DuplicateDeclaration,
    SelfReferentialInitializer, ReturnOutsideFunction, ThisOutsideClass,
)
from .tokens import Token

logger = logging.getLogger(__name__)


class FunctionType:
    NONE = "NONE"
    FUNCTION = "FUNCTION"
    METHOD = "METHOD"
    INITIALIZER = "INITIALIZER"


class ClassType:
    NONE = "NONE"
    CLASS = "CLASS"


# ============================================================================
# Resolution Table
# ============================================================================

class ResolutionTable:
    """Scope distance per reference node (keyed on node identity)"""

    def __init__(self):
        self._distances: Dict[ast.Expr, int] = {}

    def record(self, node: ast.Expr, distance: int):
        self._distances[node] = distance

    def get(self, node: ast.Expr) -> Optional[int]:
        """Distance for node, or None when it resolves to the global scope"""
        return self._distances.get(node)

    def __contains__(self, node: ast.Expr) -> bool:
        return node in self._distances

    def __len__(self) -> int:
        return len(self._distances)

    def __iter__(self) -> Iterator[ast.Expr]:
        return iter(self._distances)


@dataclass
class ResolutionResult:
    """Output of one resolve pass"""
    table: ResolutionTable
    errors: List[LoxResolveError] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.errors)


# ============================================================================
# Resolver
# ============================================================================

class Resolver:
    """Compute scope distances for one tree"""

    def __init__(self):
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.table = ResolutionTable()
        self.errors: List[LoxResolveError] = []

    def resolve(self, statements: List[ast.Stmt]) -> ResolutionResult:
        """Resolve a whole program"""
        self._resolve_statements(statements)
        logger.debug("Resolved %d local references (%d errors)", len(self.table), len(self.errors))
        return ResolutionResult(table=self.table, errors=list(self.errors))

    def _resolve_statements(self, statements: List[ast.Stmt]):
        for stmt in statements:
            self._resolve(stmt)

    def _resolve(self, node: Union[ast.Stmt, ast.Expr]):
        """Resolve a single statement or expression"""
        # Statements
        if isinstance(node, ast.Block):
            self._begin_scope()
            self._resolve_statements(node.statements)
            self._end_scope()

        elif isinstance(node, ast.Class):
            self._resolve_class(node)

        elif isinstance(node, ast.Var):
            self._declare(node.name)
            if node.initializer is not None:
                self._resolve(node.initializer)
            self._define(node.name)

        elif isinstance(node, ast.Function):
            # Defined before the body so the function can call itself
            self._declare(node.name)
            self._define(node.name)
            self._resolve_function(node, FunctionType.FUNCTION)

        elif isinstance(node, ast.Expression):
            self._resolve(node.expression)

        elif isinstance(node, ast.If):
            self._resolve(node.condition)
            self._resolve(node.then_branch)
            if node.else_branch is not None:
                self._resolve(node.else_branch)

        elif isinstance(node, ast.Print):
            self._resolve(node.expression)

        elif isinstance(node, ast.Return):
            if self.current_function == FunctionType.NONE:
                self.errors.append(ReturnOutsideFunction(node.keyword))
            if node.value is not None:
                self._resolve(node.value)

        elif isinstance(node, ast.While):
            self._resolve(node.condition)
            self._resolve(node.body)

        # Expressions
        elif isinstance(node, ast.Variable):
            if self.scopes and self.scopes[-1].get(node.name.lexeme) is False:
                self.errors.append(SelfReferentialInitializer(node.name))
            self._resolve_local(node, node.name)

        elif isinstance(node, ast.Assign):
            self._resolve(node.value)
            self._resolve_local(node, node.name)

        elif isinstance(node, (ast.Binary, ast.Logical)):
            self._resolve(node.left)
            self._resolve(node.right)

        elif isinstance(node, ast.Call):
            self._resolve(node.callee)
            for argument in node.arguments:
                self._resolve(argument)

        elif isinstance(node, ast.Get):
            # Property names are looked up dynamically
            self._resolve(node.object)

        elif isinstance(node, ast.Set):
            self._resolve(node.value)
            self._resolve(node.object)

        elif isinstance(node, ast.This):
            if self.current_class == ClassType.NONE:
                self.errors.append(ThisOutsideClass(node.keyword))
                return
            self._resolve_local(node, node.keyword)

        elif isinstance(node, ast.Grouping):
            self._resolve(node.expression)

        elif isinstance(node, ast.Unary):
            self._resolve(node.right)

        elif isinstance(node, ast.Literal):
            pass

        else:
            raise LoxInternalError(f"Unknown AST node type: {type(node).__name__}")

    def _resolve_class(self, node: ast.Class):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(node.name)
        self._define(node.name)

        # Bound methods see `this` one scope outside their parameters
        self._begin_scope()
        self.scopes[-1]["this"] = True

        for method in node.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == "init":
                kind = FunctionType.INITIALIZER
            self._resolve_function(method, kind)

        self._end_scope()
        self.current_class = enclosing_class

    def _resolve_function(self, function: ast.Function, kind: str):
        enclosing_function = self.current_function
        self.current_function = kind

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        self._resolve_statements(function.body)
        self._end_scope()

        self.current_function = enclosing_function

    def _resolve_local(self, node: ast.Expr, name: Token):
        for i in range(len(self.scopes) - 1, -1, -1):
            if name.lexeme in self.scopes[i]:
                self.table.record(node, len(self.scopes) - 1 - i)
                return
        # Not found: global

    # Scope utilities
    def _begin_scope(self):
        self.scopes.append({})

    def _end_scope(self):
        self.scopes.pop()

    def _declare(self, name: Token):
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.errors.append(DuplicateDeclaration(name))
        scope[name.lexeme] = False

    def _define(self, name: Token):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True


def resolve(statements: List[ast.Stmt]) -> ResolutionResult:
    """Resolve statements with a fresh resolver"""
    return Resolver().resolve(statements)


__all__ = ['Resolver', 'ResolutionTable', 'ResolutionResult', 'FunctionType', 'ClassType', 'resolve']
