"""
Lox Parser - Recursive descent over the token list

Grammar:
    program     -> declaration* EOF
    declaration -> classDecl | funDecl | varDecl | statement
    classDecl   -> "class" IDENTIFIER "{" function* "}"
    funDecl     -> "fun" function
    function    -> IDENTIFIER "(" parameters? ")" block
    varDecl     -> "var" IDENTIFIER ( "=" expression )? ";"
    statement   -> exprStmt | forStmt | ifStmt | printStmt
                 | returnStmt | whileStmt | block
    expression  -> assignment
    assignment  -> ( call "." )? IDENTIFIER "=" assignment | logic_or
    logic_or    -> logic_and ( "or" logic_and )*
    logic_and   -> equality ( "and" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | call
    call        -> primary ( "(" arguments? ")" | "." IDENTIFIER )*
    primary     -> "true" | "false" | "nil" | "this" | NUMBER | STRING
                 | IDENTIFIER | "(" expression ")"

`for` loops are desugared into a block holding the initializer and a
`while` whose body runs the increment after the original body.

On a syntax error the parser records it, skips to the next statement
boundary and keeps going.
"""

import logging
from typing import List, Optional

from . import ast_nodes as ast
from .errors import LoxParseError
from .tokens import Token, TokenType

logger = logging.getLogger(__name__)

MAX_ARGUMENTS = 255


class LoxParser:
    """Parse Lox tokens into a list of statements"""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.errors: List[LoxParseError] = []

    def parse(self) -> List[ast.Stmt]:
        """Parse all statements"""
        statements = []
        while not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        logger.debug("Parsed %d statements (%d errors)", len(statements), len(self.errors))
        return statements

    def parse_expression(self) -> Optional[ast.Expr]:
        """
        Parse input that must be exactly one expression with no trailing ';'.

        Lets the prompt echo a bare expression like `1 + 2`. Returns None and
        records the error when anything else is found.
        """
        try:
            expr = self._expression()
            if not self._is_at_end():
                raise self._error(self._peek(), "Expect end of expression.")
            return expr
        except LoxParseError as e:
            self.errors.append(e)
            return None

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _declaration(self) -> Optional[ast.Stmt]:
        try:
            if self._match(TokenType.CLASS):
                return self._class_declaration()
            if self._match(TokenType.FUN):
                return self._function("function")
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except LoxParseError as e:
            self.errors.append(e)
            self._synchronize()
            return None

    def _class_declaration(self) -> ast.Class:
        name = self._consume(TokenType.IDENTIFIER, "Expect class name.")
        if self._check(TokenType.LESS):
            raise self._error(self._peek(), "Class inheritance is not supported.")
        self._consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")

        methods = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            methods.append(self._function("method"))

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return ast.Class(name=name, methods=methods)

    def _function(self, kind: str) -> ast.Function:
        name = self._consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self._consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    # Reported, not raised: the parser is not confused
                    self.errors.append(LoxParseError(
                        self._peek(), f"Can't have more than {MAX_ARGUMENTS} parameters."))
                params.append(self._consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self._match(TokenType.COMMA):
                    break
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self._consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self._block()
        return ast.Function(name=name, params=params, body=body)

    def _var_declaration(self) -> ast.Var:
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return ast.Var(name=name, initializer=initializer)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _statement(self) -> ast.Stmt:
        if self._match(TokenType.FOR):
            return self._for_statement()
        if self._match(TokenType.IF):
            return self._if_statement()
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.RETURN):
            return self._return_statement()
        if self._match(TokenType.WHILE):
            return self._while_statement()
        if self._match(TokenType.LEFT_BRACE):
            return ast.Block(statements=self._block())
        return self._expression_statement()

    def _for_statement(self) -> ast.Stmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self._match(TokenType.SEMICOLON):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_declaration()
        else:
            initializer = self._expression_statement()

        condition = None
        if not self._check(TokenType.SEMICOLON):
            condition = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self._check(TokenType.RIGHT_PAREN):
            increment = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()

        if increment is not None:
            body = ast.Block(statements=[body, ast.Expression(expression=increment)])
        if condition is None:
            condition = ast.Literal(value=True)
        body = ast.While(condition=condition, body=body)
        if initializer is not None:
            body = ast.Block(statements=[initializer, body])
        return body

    def _if_statement(self) -> ast.If:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self._statement()
        else_branch = None
        if self._match(TokenType.ELSE):
            else_branch = self._statement()
        return ast.If(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def _print_statement(self) -> ast.Print:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return ast.Print(expression=value)

    def _return_statement(self) -> ast.Return:
        keyword = self._previous()
        value = None
        if not self._check(TokenType.SEMICOLON):
            value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return ast.Return(keyword=keyword, value=value)

    def _while_statement(self) -> ast.While:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return ast.While(condition=condition, body=self._statement())

    def _block(self) -> List[ast.Stmt]:
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            stmt = self._declaration()
            if stmt is not None:
                statements.append(stmt)
        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def _expression_statement(self) -> ast.Expression:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ast.Expression(expression=expr)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self) -> ast.Expr:
        return self._assignment()

    def _assignment(self) -> ast.Expr:
        expr = self._or()

        if self._match(TokenType.EQUAL):
            equals = self._previous()
            value = self._assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(name=expr.name, value=value)
            if isinstance(expr, ast.Get):
                return ast.Set(object=expr.object, name=expr.name, value=value)

            self.errors.append(LoxParseError(equals, "Invalid assignment target."))

        return expr

    def _or(self) -> ast.Expr:
        expr = self._and()
        while self._match(TokenType.OR):
            operator = self._previous()
            right = self._and()
            expr = ast.Logical(left=expr, operator=operator, right=right)
        return expr

    def _and(self) -> ast.Expr:
        expr = self._equality()
        while self._match(TokenType.AND):
            operator = self._previous()
            right = self._equality()
            expr = ast.Logical(left=expr, operator=operator, right=right)
        return expr

    def _equality(self) -> ast.Expr:
        return self._binary(self._comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def _comparison(self) -> ast.Expr:
        return self._binary(self._term, TokenType.GREATER, TokenType.GREATER_EQUAL,
                            TokenType.LESS, TokenType.LESS_EQUAL)

    def _term(self) -> ast.Expr:
        return self._binary(self._factor, TokenType.MINUS, TokenType.PLUS)

    def _factor(self) -> ast.Expr:
        return self._binary(self._unary, TokenType.SLASH, TokenType.STAR)

    def _binary(self, operand, *operators: str) -> ast.Expr:
        """Left-associative binary level"""
        expr = operand()
        while self._match(*operators):
            operator = self._previous()
            right = operand()
            expr = ast.Binary(left=expr, operator=operator, right=right)
        return expr

    def _unary(self) -> ast.Expr:
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return ast.Unary(operator=operator, right=self._unary())
        return self._call()

    def _call(self) -> ast.Expr:
        expr = self._primary()

        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = ast.Get(object=expr, name=name)
            else:
                break

        return expr

    def _finish_call(self, callee: ast.Expr) -> ast.Call:
        arguments = []
        if not self._check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.errors.append(LoxParseError(
                        self._peek(), f"Can't have more than {MAX_ARGUMENTS} arguments."))
                arguments.append(self._expression())
                if not self._match(TokenType.COMMA):
                    break

        paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return ast.Call(callee=callee, paren=paren, arguments=arguments)

    def _primary(self) -> ast.Expr:
        if self._match(TokenType.FALSE):
            return ast.Literal(value=False)
        if self._match(TokenType.TRUE):
            return ast.Literal(value=True)
        if self._match(TokenType.NIL):
            return ast.Literal(value=None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return ast.Literal(value=self._previous().literal)

        if self._match(TokenType.THIS):
            return ast.This(keyword=self._previous())

        if self._match(TokenType.IDENTIFIER):
            return ast.Variable(name=self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return ast.Grouping(expression=expr)

        if self._check(TokenType.SUPER):
            raise self._error(self._peek(), "'super' is not supported.")

        raise self._error(self._peek(), "Expect expression.")

    # ------------------------------------------------------------------
    # Parser utilities
    # ------------------------------------------------------------------

    def _match(self, *types: str) -> bool:
        """Check if current token matches any of the given types"""
        for type in types:
            if self._check(type):
                self._advance()
                return True
        return False

    def _consume(self, type: str, message: str) -> Token:
        if self._check(type):
            return self._advance()
        raise self._error(self._peek(), message)

    def _check(self, type: str) -> bool:
        if self._is_at_end():
            return False
        return self._peek().type == type

    def _advance(self) -> Token:
        if not self._is_at_end():
            self.pos += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def _error(self, token: Token, message: str) -> LoxParseError:
        return LoxParseError(token, message)

    def _synchronize(self):
        """Discard tokens until a likely statement boundary"""
        self._advance()

        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                return
            if self._peek().type in (TokenType.CLASS, TokenType.FUN, TokenType.VAR,
                                     TokenType.FOR, TokenType.IF, TokenType.WHILE,
                                     TokenType.PRINT, TokenType.RETURN):
                return
            self._advance()


__all__ = ['LoxParser', 'MAX_ARGUMENTS']
