"""
Lox Tokenizer - Source text to token list

Errors do not stop the scan: each bad character or unterminated string is
recorded in `errors` and scanning continues, so one pass reports everything.
"""

import logging
from typing import Any, List

from .errors import LoxSyntaxError
from .tokens import KEYWORDS, Token, TokenType

logger = logging.getLogger(__name__)


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# char -> (type without '=', type with '=')
EQUAL_SUFFIX_TOKENS = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


# Lox letters and digits are ASCII only
def is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


def is_alpha(ch: str) -> bool:
    return 'a' <= ch <= 'z' or 'A' <= ch <= 'Z' or ch == '_'


def is_alpha_numeric(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch)


class LoxTokenizer:
    """Tokenize Lox source code"""

    def __init__(self, source: str):
        self.source = source
        self.start = 0
        self.pos = 0
        self.line = 1
        self.tokens: List[Token] = []
        self.errors: List[LoxSyntaxError] = []

    def tokenize(self) -> List[Token]:
        """Tokenize entire source"""
        while not self._is_at_end():
            self.start = self.pos
            self._scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        logger.debug("Tokenized %d tokens (%d errors)", len(self.tokens), len(self.errors))
        return self.tokens

    def _scan_token(self):
        ch = self._advance()

        if ch in SINGLE_CHAR_TOKENS:
            self._add_token(SINGLE_CHAR_TOKENS[ch])
        elif ch in EQUAL_SUFFIX_TOKENS:
            plain, with_equal = EQUAL_SUFFIX_TOKENS[ch]
            self._add_token(with_equal if self._match('=') else plain)
        elif ch == '/':
            if self._match('/'):
                # Comment runs to end of line
                while self._peek() != '\n' and not self._is_at_end():
                    self.pos += 1
            else:
                self._add_token(TokenType.SLASH)
        elif ch in ' \r\t':
            pass
        elif ch == '\n':
            self.line += 1
        elif ch == '"':
            self._read_string()
        elif is_digit(ch):
            self._read_number()
        elif is_alpha(ch):
            self._read_identifier()
        else:
            self._error("Unexpected character.")

    def _read_string(self):
        """Read string literal; may span lines, no escapes"""
        while self._peek() != '"' and not self._is_at_end():
            if self._peek() == '\n':
                self.line += 1
            self.pos += 1

        if self._is_at_end():
            self._error("Unterminated string.")
            return

        self.pos += 1  # Closing quote
        value = self.source[self.start + 1:self.pos - 1]
        self._add_token(TokenType.STRING, value)

    def _read_number(self):
        """Read numeric literal; always a double"""
        while is_digit(self._peek()):
            self.pos += 1

        # A trailing '.' without digits is a separate DOT token
        if self._peek() == '.' and is_digit(self._peek_next()):
            self.pos += 1
            while is_digit(self._peek()):
                self.pos += 1

        self._add_token(TokenType.NUMBER, float(self.source[self.start:self.pos]))

    def _read_identifier(self):
        while is_alpha_numeric(self._peek()):
            self.pos += 1

        text = self.source[self.start:self.pos]
        self._add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    # Scanner utilities
    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def _match(self, expected: str) -> bool:
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self.pos += 1
        return True

    def _peek(self) -> str:
        if self._is_at_end():
            return '\0'
        return self.source[self.pos]

    def _peek_next(self) -> str:
        if self.pos + 1 >= len(self.source):
            return '\0'
        return self.source[self.pos + 1]

    def _add_token(self, type: str, literal: Any = None):
        text = self.source[self.start:self.pos]
        self.tokens.append(Token(type, text, literal, self.line))

    def _error(self, message: str):
        self.errors.append(LoxSyntaxError(message, self.line))


__all__ = ['LoxTokenizer']
