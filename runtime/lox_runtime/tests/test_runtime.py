"""
Test suite for the LoxRuntime pipeline and command line driver
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from lox_runtime import ast_nodes as ast
from lox_runtime import cli
from lox_runtime.errors import (
    LoxStaticErrors, UndefinedVariable, DuplicateDeclaration, NestingTooDeep,
    E_PARSE_ERROR, E_RESOLVE_ERROR, E_SYNTAX_ERROR,
)
from lox_runtime.runtime import LoxRuntime, execute_lox


class TestStaticErrorsBlockExecution:
    """Test nothing runs when a static stage fails"""

    def test_resolve_error_prevents_run(self, runtime, output):
        with pytest.raises(LoxStaticErrors) as exc_info:
            runtime.execute('print "side effect"; { var a = 1; var a = 2; }')
        assert output == []
        assert exc_info.value.code == E_RESOLVE_ERROR
        assert [type(e) for e in exc_info.value.errors] == [DuplicateDeclaration]

    def test_top_level_return_prevents_run(self, runtime, output):
        with pytest.raises(LoxStaticErrors):
            runtime.execute('print 1; return;')
        assert output == []

    def test_parse_error_prevents_run(self, runtime, output):
        with pytest.raises(LoxStaticErrors) as exc_info:
            runtime.execute('print 1; print ;')
        assert output == []
        assert exc_info.value.code == E_PARSE_ERROR

    def test_syntax_error_reported(self, runtime):
        with pytest.raises(LoxStaticErrors) as exc_info:
            runtime.execute('print "unterminated;')
        assert exc_info.value.errors[0].code == E_SYNTAX_ERROR

    def test_report_lists_all_errors(self, runtime):
        with pytest.raises(LoxStaticErrors) as exc_info:
            runtime.execute('{ var a = 1; var a = 2; }\nreturn 3;')
        assert exc_info.value.report() == (
            "[line 1] Error at 'a': Already a variable with this name in this scope.\n"
            "[line 2] Error at 'return': Can't return from top-level code."
        )


class TestRuntimeInterface:
    """Test global state helpers"""

    def test_globals_persist_between_runs(self, runtime, output):
        runtime.execute('var a = "kept";')
        runtime.execute('print a;')
        assert output == ['kept']

    def test_set_var(self, runtime, output):
        runtime.set_var('external', 100.0)
        runtime.execute('print external;')
        assert output == ['100']

    def test_get_var(self, runtime):
        runtime.execute('var x = 10;')
        assert runtime.get_var('x') == 10.0

    def test_get_var_missing(self, runtime):
        with pytest.raises(UndefinedVariable):
            runtime.get_var('missing')

    def test_get_env(self, runtime):
        runtime.execute('var x = 1; var y = 2;')
        env = runtime.get_env()
        assert env['x'] == 1.0
        assert env['y'] == 2.0
        assert 'clock' in env

    def test_clear_env(self, runtime, output):
        runtime.execute('var x = 10;')
        runtime.clear_env()
        assert 'clock' in runtime.get_env()
        assert 'x' not in runtime.get_env()
        runtime.execute('print clock();')
        assert output == ['1234.5']

    def test_execute_file(self, runtime, output, tmp_path):
        script = tmp_path / "hello.lox"
        script.write_text('print "from file";', encoding='utf-8')
        runtime.execute_file(str(script))
        assert output == ['from file']

    def test_default_output_is_stdout(self, capsys):
        LoxRuntime().execute('print "to stdout";')
        assert capsys.readouterr().out == "to stdout\n"


class TestConvenienceFunction:
    """Test execute_lox convenience function"""

    def test_collects_lines(self):
        assert execute_lox('print 1 + 2; print "two";') == ['3', 'two']

    def test_empty_program(self):
        assert execute_lox('') == []


class TestDeepNesting:
    """Test host stack limits surface as Lox errors"""

    def test_long_operator_chain(self, output):
        runtime = LoxRuntime(output=output.append)
        with pytest.raises(LoxStaticErrors) as exc_info:
            runtime.execute("print " + " + ".join(["1"] * 5000) + ";")
        assert exc_info.value.code == E_RESOLVE_ERROR
        assert [type(e) for e in exc_info.value.errors] == [NestingTooDeep]
        assert output == []

    def test_deep_parentheses(self):
        with pytest.raises(LoxStaticErrors) as exc_info:
            execute_lox("print " + "(" * 3000 + "1" + ")" * 3000 + ";")
        assert exc_info.value.code == E_PARSE_ERROR
        assert exc_info.value.errors[0].message == "Too much nesting."

    def test_runtime_usable_afterwards(self, runtime, output):
        with pytest.raises(LoxStaticErrors):
            runtime.execute("print " + "(" * 3000 + "1" + ")" * 3000 + ";")
        runtime.execute("print (((1)));")
        assert output == ["1"]

    def test_non_ascii_digit_is_static_error(self):
        with pytest.raises(LoxStaticErrors) as exc_info:
            execute_lox("print 1\u00b2;")
        assert exc_info.value.code == E_SYNTAX_ERROR


class TestInteractiveLines:
    """Test line-at-a-time execution used by the prompt"""

    def test_bare_expression_is_printed(self, runtime, output):
        runtime.execute_line("1 + 2")
        assert output == ["3"]

    def test_statements_run_normally(self, runtime, output):
        runtime.execute_line("var a = 4;")
        runtime.execute_line("print a;")
        runtime.execute_line("a = 5;")
        assert output == ["4"]
        runtime.execute_line("a")
        assert output == ["4", "5"]

    def test_bare_assignment_is_printed(self, runtime, output):
        runtime.execute("var a;")
        runtime.execute_line("a = \"x\"")
        assert output == ["x"]
        assert runtime.get_var("a") == "x"

    def test_incomplete_expression(self, runtime):
        with pytest.raises(LoxStaticErrors) as exc_info:
            runtime.execute_line("1 +")
        assert exc_info.value.code == E_PARSE_ERROR

    def test_parse_line_wraps_expression_in_print(self, runtime):
        statements = runtime.parse_line("nil")
        assert len(statements) == 1
        assert isinstance(statements[0], ast.Print)


class TestCli:
    """Test the command line driver"""

    def test_command(self, capsys):
        assert cli.main(['-c', 'print 1 + 1;']) == 0
        assert capsys.readouterr().out == "2\n"

    def test_script(self, capsys, tmp_path):
        script = tmp_path / "prog.lox"
        script.write_text('var a = "ok"; print a;', encoding='utf-8')
        assert cli.main([str(script)]) == 0
        assert capsys.readouterr().out == "ok\n"

    def test_static_error_exit_code(self, capsys):
        assert cli.main(['-c', 'return 1;']) == cli.EXIT_STATIC_ERROR
        assert "Can't return from top-level code." in capsys.readouterr().err

    def test_runtime_error_exit_code(self, capsys):
        assert cli.main(['-c', 'print "a";\nprint -"b";']) == cli.EXIT_RUNTIME_ERROR
        captured = capsys.readouterr()
        assert captured.out == "a\n"
        assert captured.err == "Operand must be a number.\n[line 2]\n"

    def test_print_ast(self, capsys):
        assert cli.main(['--print-ast', '-c', 'print 1;']) == 0
        assert capsys.readouterr().out == "(print 1)\n1\n"

    def test_missing_script(self, capsys, tmp_path):
        assert cli.main([str(tmp_path / "missing.lox")]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_deep_nesting_exit_code(self, capsys):
        source = "print " + "(" * 3000 + "1" + ")" * 3000 + ";"
        assert cli.main(['-c', source]) == cli.EXIT_STATIC_ERROR
        assert "Too much nesting." in capsys.readouterr().err

    def test_deep_tree_with_print_ast(self, capsys):
        source = "print " + " + ".join(["1"] * 5000) + ";"
        assert cli.main(['--print-ast', '-c', source]) == cli.EXIT_STATIC_ERROR
        captured = capsys.readouterr()
        assert captured.out == "(tree too deep to print)\n"
        assert "Too much nesting." in captured.err

    def test_prompt_keeps_state_and_survives_errors(self, capsys, monkeypatch):
        lines = iter(['var a = 1;', 'print b;', 'print a;', 'a + 41'])

        def fake_input(prompt):
            try:
                return next(lines)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr('builtins.input', fake_input)
        assert cli.main([]) == 0
        captured = capsys.readouterr()
        assert "1\n" in captured.out
        assert "Undefined variable 'b'." in captured.err
        assert "42\n" in captured.out


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
