"""
Lox Interpreter - Tree-walking evaluator

Executes resolved statements against a chain of Environments.

Statement execution returns a completion: None when the statement finished
normally, or an `Unwind` when a `return` is travelling outward. Blocks and
loops hand an `Unwind` straight back to their caller; only a function call
consumes it. Runtime failures are exceptions and abort the whole run.

Variable access uses the resolver's table: a recorded distance means "read
exactly that many scopes out", no entry means "read the global scope".
"""

import logging
import math
import time
from typing import Any, Callable, List, Optional

from . import ast_nodes as ast
from .callables import LoxCallable, LoxClass, LoxFunction, LoxInstance, NativeFunction
from .control import Unwind
from .environment import Environment
from .errors import LoxInternalError, LoxTypeError, ArityMismatch, StackOverflow
from .resolver import ResolutionTable
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


# ============================================================================
# Value Helpers
# ============================================================================

def is_truthy(value: Any) -> bool:
    """nil and false are falsy, everything else is truthy"""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Equality without cross-type coercion"""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    # bool is an int subclass in Python; never let true == 1
    if type(a) is not type(b):
        return False
    if isinstance(a, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


INTEGRAL_DISPLAY_LIMIT = 1e21


def stringify(value: Any) -> str:
    """Display text used by `print`"""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        # Integral values print without a fraction or exponent
        if value.is_integer() and abs(value) < INTEGRAL_DISPLAY_LIMIT:
            if value == 0 and math.copysign(1.0, value) < 0:
                return "-0"
            return "%d" % value
        return repr(value)
    return str(value)


def _divide(left: float, right: float) -> float:
    # IEEE-754: division by zero gives infinity or NaN, not an error
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


NUMERIC_OPERATORS = {
    TokenType.MINUS: lambda a, b: a - b,
    TokenType.STAR: lambda a, b: a * b,
    TokenType.SLASH: _divide,
    TokenType.GREATER: lambda a, b: a > b,
    TokenType.GREATER_EQUAL: lambda a, b: a >= b,
    TokenType.LESS: lambda a, b: a < b,
    TokenType.LESS_EQUAL: lambda a, b: a <= b,
}


# ============================================================================
# Interpreter
# ============================================================================

class Interpreter:
    """Evaluate resolved Lox statements"""

    def __init__(self, output: Optional[Callable[[str], Any]] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.output = output if output is not None else print
        self.globals = Environment()
        self.environment = self.globals
        self.locals = ResolutionTable()
        self._setup_builtins(clock if clock is not None else time.time)

    def _setup_builtins(self, clock: Callable[[], float]):
        """Setup native functions"""
        self.globals.define("clock", NativeFunction("clock", 0, lambda: float(clock())))

    def interpret(self, statements: List[ast.Stmt], table: ResolutionTable):
        """
        Run top-level statements with the distances from one resolve pass.

        The first runtime error propagates to the caller; statements after
        the failing one do not run. An expression nested too deeply to
        evaluate outside any call raises StackOverflow with no line.
        """
        previous = self.locals
        self.locals = table
        try:
            for statement in statements:
                completion = self.execute(statement)
                if completion is not None:
                    raise LoxInternalError("'return' escaped the outermost call")
        except RecursionError:
            raise StackOverflow() from None
        finally:
            self.locals = previous

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute(self, stmt: ast.Stmt) -> Optional[Unwind]:
        """Execute a statement; returns an Unwind when a `return` is pending"""
        if isinstance(stmt, ast.Expression):
            self.evaluate(stmt.expression)
            return None

        elif isinstance(stmt, ast.Print):
            value = self.evaluate(stmt.expression)
            self.output(stringify(value))
            return None

        elif isinstance(stmt, ast.Var):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer)
            self.environment.define(stmt.name.lexeme, value)
            return None

        elif isinstance(stmt, ast.Block):
            return self.execute_block(stmt.statements, Environment(self.environment))

        elif isinstance(stmt, ast.If):
            if is_truthy(self.evaluate(stmt.condition)):
                return self.execute(stmt.then_branch)
            elif stmt.else_branch is not None:
                return self.execute(stmt.else_branch)
            return None

        elif isinstance(stmt, ast.While):
            while is_truthy(self.evaluate(stmt.condition)):
                completion = self.execute(stmt.body)
                if completion is not None:
                    return completion
            return None

        elif isinstance(stmt, ast.Function):
            function = LoxFunction(stmt, self.environment, self.locals)
            self.environment.define(stmt.name.lexeme, function)
            return None

        elif isinstance(stmt, ast.Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value)
            return Unwind(value)

        elif isinstance(stmt, ast.Class):
            self._execute_class(stmt)
            return None

        else:
            raise LoxInternalError(f"Unknown statement type: {type(stmt).__name__}")

    def _execute_class(self, stmt: ast.Class):
        # Placeholder first so methods can name the class
        self.environment.define(stmt.name.lexeme, None)

        methods = {}
        for method in stmt.methods:
            methods[method.name.lexeme] = LoxFunction(
                method, self.environment, self.locals,
                is_initializer=method.name.lexeme == "init")

        klass = LoxClass(stmt.name.lexeme, methods)
        self.environment.assign(stmt.name, klass)
        logger.debug("Declared class %s with methods %s", klass.name, sorted(methods))

    def execute_block(self, statements: List[ast.Stmt], environment: Environment) -> Optional[Unwind]:
        """Run statements in environment, restoring the current scope on every exit path"""
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                completion = self.execute(statement)
                if completion is not None:
                    return completion
            return None
        finally:
            self.environment = previous

    def execute_body(self, statements: List[ast.Stmt], environment: Environment,
                     table: ResolutionTable) -> Optional[Unwind]:
        """Run a function body with the distances of the run that declared it"""
        previous = self.locals
        try:
            self.locals = table
            return self.execute_block(statements, environment)
        finally:
            self.locals = previous

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def evaluate(self, expr: ast.Expr) -> Any:
        """Evaluate an expression to a Lox value"""
        if isinstance(expr, ast.Literal):
            return expr.value

        elif isinstance(expr, ast.Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, ast.Variable):
            return self._look_up_variable(expr.name, expr)

        elif isinstance(expr, ast.Assign):
            value = self.evaluate(expr.value)
            distance = self.locals.get(expr)
            if distance is not None:
                self.environment.assign_at(distance, expr.name, value)
            else:
                self.globals.assign(expr.name, value)
            return value

        elif isinstance(expr, ast.Logical):
            left = self.evaluate(expr.left)
            if expr.operator.type == TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        elif isinstance(expr, ast.Unary):
            right = self.evaluate(expr.right)
            if expr.operator.type == TokenType.BANG:
                return not is_truthy(right)
            if expr.operator.type == TokenType.MINUS:
                self._check_number_operand(expr.operator, right)
                return -right
            raise LoxInternalError(f"Unknown unary operator: {expr.operator.lexeme}", expr.operator)

        elif isinstance(expr, ast.Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self._eval_binary_op(expr.operator, left, right)

        elif isinstance(expr, ast.Call):
            return self._eval_call(expr)

        elif isinstance(expr, ast.Get):
            obj = self.evaluate(expr.object)
            if isinstance(obj, LoxInstance):
                return obj.get(expr.name)
            raise LoxTypeError(expr.name, "Only instances have properties.")

        elif isinstance(expr, ast.Set):
            obj = self.evaluate(expr.object)
            if not isinstance(obj, LoxInstance):
                raise LoxTypeError(expr.name, "Only instances have fields.")
            value = self.evaluate(expr.value)
            obj.set(expr.name, value)
            return value

        elif isinstance(expr, ast.This):
            return self._look_up_variable(expr.keyword, expr)

        else:
            raise LoxInternalError(f"Unknown expression type: {type(expr).__name__}")

    def _look_up_variable(self, name: Token, expr: ast.Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name)
        return self.globals.get(name)

    def _eval_binary_op(self, operator: Token, left: Any, right: Any) -> Any:
        """Evaluate binary operation"""
        if operator.type == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxTypeError(operator, "Operands must be two numbers or two strings.")

        if operator.type == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        op = NUMERIC_OPERATORS.get(operator.type)
        if op is None:
            raise LoxInternalError(f"Unknown binary operator: {operator.lexeme}", operator)
        self._check_number_operands(operator, left, right)
        return op(left, right)

    def _eval_call(self, expr: ast.Call) -> Any:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxTypeError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise ArityMismatch(expr.paren, callee.arity(), len(arguments))

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise StackOverflow(expr.paren) from None

    # Operand checks
    def _check_number_operand(self, operator: Token, operand: Any):
        if isinstance(operand, float):
            return
        raise LoxTypeError(operator, "Operand must be a number.")

    def _check_number_operands(self, operator: Token, left: Any, right: Any):
        if isinstance(left, float) and isinstance(right, float):
            return
        raise LoxTypeError(operator, "Operands must be numbers.")


__all__ = ['Interpreter', 'is_truthy', 'is_equal', 'stringify']
