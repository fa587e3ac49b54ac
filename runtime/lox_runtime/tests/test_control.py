"""
Test suite for `return` unwinding and scope restoration
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lox_runtime import ast_nodes as ast
from lox_runtime.control import Unwind
from lox_runtime.errors import LoxInternalError, StackOverflow, E_STACK_OVERFLOW
from lox_runtime.interpreter import Interpreter
from lox_runtime.resolver import ResolutionTable
from lox_runtime.tokens import Token, TokenType


RETURN_SHAPES = [
    'fun f() { return "v"; }',
    'fun f() { { { return "v"; } } }',
    'fun f() { while (true) { { return "v"; } } }',
    'fun f() { for (var i = 0; i < 10; i = i + 1) { if (i == 3) return "v"; } }',
    'fun f() { if (true) { var a = 1; { var b = 2; return "v"; } } else return "no"; }',
    'fun f() { fun g() { return "v"; } { return g(); } }',
]


class TestReturnUnwind:
    """Test return crosses blocks and loops to the call boundary"""

    @pytest.mark.parametrize('declaration', RETURN_SHAPES)
    def test_returns_value(self, runtime, output, declaration):
        runtime.execute(declaration)
        runtime.execute('print f();')
        assert output == ['v']

    @pytest.mark.parametrize('declaration', RETURN_SHAPES)
    def test_scope_restored_after_call(self, runtime, output, declaration):
        runtime.execute(declaration)
        interpreter = runtime.interpreter
        runtime.execute('{ var before = 1; { print f(); } }')
        assert interpreter.environment is interpreter.globals
        assert interpreter.environment.depth() == 0

    def test_caller_scope_unaffected(self, runtime, output):
        runtime.execute('''
            fun f() { { var x = "inner"; return x; } }
            {
                var x = "caller";
                var r = f();
                print x;
                print r;
            }
        ''')
        assert output == ['caller', 'inner']

    def test_return_stops_loop(self, runtime, output):
        runtime.execute('''
            fun first() {
                var i = 0;
                while (true) {
                    print i;
                    if (i == 2) return i;
                    i = i + 1;
                }
            }
            print first();
        ''')
        assert output == ['0', '1', '2', '2']

    def test_return_without_value(self, runtime, output):
        runtime.execute('fun f() { return; print "unreachable"; } print f();')
        assert output == ['nil']

    def test_return_only_leaves_innermost_call(self, runtime, output):
        runtime.execute('''
            fun inner() { return "inner"; }
            fun outer() {
                var r = inner();
                print "after " + r;
                return "outer";
            }
            print outer();
        ''')
        assert output == ['after inner', 'outer']

    def test_execute_reports_unwind(self):
        interpreter = Interpreter(output=lambda line: None)
        keyword = Token(TokenType.RETURN, "return", None, 1)
        stmt = ast.Block(statements=[ast.Return(keyword=keyword, value=ast.Literal(value=7.0))])
        completion = interpreter.execute(stmt)
        assert completion == Unwind(7.0)
        assert interpreter.environment is interpreter.globals

    def test_unwind_at_top_level_is_internal_fault(self):
        # The resolver rejects this program; bypass it to hit the guard
        interpreter = Interpreter(output=lambda line: None)
        keyword = Token(TokenType.RETURN, "return", None, 1)
        with pytest.raises(LoxInternalError):
            interpreter.interpret([ast.Return(keyword=keyword)], ResolutionTable())


class TestStackOverflow:
    """Test runaway recursion becomes a runtime error"""

    def test_unbounded_recursion(self, runtime):
        runtime.execute('fun loop(n) { return loop(n + 1); }')
        with pytest.raises(StackOverflow) as exc_info:
            runtime.execute('loop(0);')
        assert exc_info.value.code == E_STACK_OVERFLOW
        assert exc_info.value.message == "Stack overflow."

    def test_scope_restored_after_overflow(self, runtime, output):
        runtime.execute('fun loop() { { loop(); } }')
        with pytest.raises(StackOverflow):
            runtime.execute('{ loop(); }')
        interpreter = runtime.interpreter
        assert interpreter.environment is interpreter.globals
        runtime.execute('print "still running";')
        assert output == ['still running']

    def test_deep_expression_outside_any_call(self):
        plus = Token(TokenType.PLUS, "+", None, 1)
        expr = ast.Literal(1.0)
        for _ in range(5000):
            expr = ast.Binary(expr, plus, ast.Literal(1.0))
        interpreter = Interpreter(output=lambda text: None)
        with pytest.raises(StackOverflow) as exc_info:
            interpreter.interpret([ast.Expression(expr)], ResolutionTable())
        assert exc_info.value.line is None
        assert exc_info.value.report() == "Stack overflow."
        assert interpreter.environment is interpreter.globals


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
