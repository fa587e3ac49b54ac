"""
Lox AST Printer - Debug rendering of syntax trees

Renders nodes in a parenthesized prefix form, e.g. `-123 * (45.67)`
prints as `(* (- 123) (group 45.67))`.
"""

from typing import List, Union

from . import ast_nodes as ast
from .errors import LoxInternalError
from .interpreter import stringify


class AstPrinter:
    """Render expressions and statements as parenthesized text"""

    def print(self, node: Union[ast.Expr, ast.Stmt]) -> str:
        if isinstance(node, ast.Stmt):
            return self._print_stmt(node)
        return self._print_expr(node)

    def print_program(self, statements: List[ast.Stmt]) -> str:
        return "\n".join(self.print(stmt) for stmt in statements)

    def _print_expr(self, expr: ast.Expr) -> str:
        if isinstance(expr, ast.Literal):
            if isinstance(expr.value, str):
                return f'"{expr.value}"'
            return stringify(expr.value)
        elif isinstance(expr, ast.Variable):
            return expr.name.lexeme
        elif isinstance(expr, ast.This):
            return "this"
        elif isinstance(expr, ast.Assign):
            return self._parenthesize(f"= {expr.name.lexeme}", expr.value)
        elif isinstance(expr, (ast.Binary, ast.Logical)):
            return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)
        elif isinstance(expr, ast.Unary):
            return self._parenthesize(expr.operator.lexeme, expr.right)
        elif isinstance(expr, ast.Grouping):
            return self._parenthesize("group", expr.expression)
        elif isinstance(expr, ast.Call):
            return self._parenthesize("call", expr.callee, *expr.arguments)
        elif isinstance(expr, ast.Get):
            return self._parenthesize(f". {expr.name.lexeme}", expr.object)
        elif isinstance(expr, ast.Set):
            return self._parenthesize(f".= {expr.name.lexeme}", expr.object, expr.value)
        raise LoxInternalError(f"Unknown expression type: {type(expr).__name__}")

    def _print_stmt(self, stmt: ast.Stmt) -> str:
        if isinstance(stmt, ast.Expression):
            return self._parenthesize(";", stmt.expression)
        elif isinstance(stmt, ast.Print):
            return self._parenthesize("print", stmt.expression)
        elif isinstance(stmt, ast.Var):
            if stmt.initializer is None:
                return f"(var {stmt.name.lexeme})"
            return self._parenthesize(f"var {stmt.name.lexeme}", stmt.initializer)
        elif isinstance(stmt, ast.Block):
            return self._parenthesize("block", *stmt.statements)
        elif isinstance(stmt, ast.If):
            if stmt.else_branch is None:
                return self._parenthesize("if", stmt.condition, stmt.then_branch)
            return self._parenthesize("if-else", stmt.condition, stmt.then_branch, stmt.else_branch)
        elif isinstance(stmt, ast.While):
            return self._parenthesize("while", stmt.condition, stmt.body)
        elif isinstance(stmt, ast.Return):
            if stmt.value is None:
                return "(return)"
            return self._parenthesize("return", stmt.value)
        elif isinstance(stmt, ast.Function):
            params = " ".join(p.lexeme for p in stmt.params)
            return self._parenthesize(f"fun {stmt.name.lexeme}({params})", *stmt.body)
        elif isinstance(stmt, ast.Class):
            return self._parenthesize(f"class {stmt.name.lexeme}", *stmt.methods)
        raise LoxInternalError(f"Unknown statement type: {type(stmt).__name__}")

    def _parenthesize(self, name: str, *parts: Union[ast.Expr, ast.Stmt]) -> str:
        pieces = [name] + [self.print(part) for part in parts]
        return "(" + " ".join(pieces) + ")"


__all__ = ['AstPrinter']
