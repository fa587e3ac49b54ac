"""
Lox AST Nodes

Two closed families: expressions (`Expr`) and statements (`Stmt`).

Nodes compare and hash by identity (`eq=False`). The resolver keys its
distance table on the node object itself, so two textually identical
references such as the two `a`s in `a + a` stay distinct entries.
"""

from typing import Any, List, Optional
from dataclasses import dataclass

from .tokens import Token


# ============================================================================
# Expressions
# ============================================================================

@dataclass(eq=False)
class Expr:
    """Base expression node"""
    pass


@dataclass(eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Call(Expr):
    callee: Expr
    paren: Token
    arguments: List[Expr]


@dataclass(eq=False)
class Get(Expr):
    """Property read: `object.name`"""
    object: Expr
    name: Token


@dataclass(eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(eq=False)
class Literal(Expr):
    value: Any


@dataclass(eq=False)
class Logical(Expr):
    """Short-circuiting `and` / `or`"""
    left: Expr
    operator: Token
    right: Expr


@dataclass(eq=False)
class Set(Expr):
    """Property write: `object.name = value`"""
    object: Expr
    name: Token
    value: Expr


@dataclass(eq=False)
class This(Expr):
    keyword: Token


@dataclass(eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(eq=False)
class Variable(Expr):
    name: Token


# ============================================================================
# Statements
# ============================================================================

@dataclass(eq=False)
class Stmt:
    """Base statement node"""
    pass


@dataclass(eq=False)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(eq=False)
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(eq=False)
class Class(Stmt):
    name: Token
    methods: List[Function]


@dataclass(eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


__all__ = [
    'Expr', 'Assign', 'Binary', 'Call', 'Get', 'Grouping', 'Literal',
    'Logical', 'Set', 'This', 'Unary', 'Variable',
    'Stmt', 'Block', 'Expression', 'Function', 'Class', 'If', 'Print',
    'Return', 'Var', 'While',
]
