"""Tokenizer and recursive-descent parser for seqlang.

The parser works on a character stream rather than a whole string so
that a driver can parse and run one statement at a time. Tokens are
produced lazily by ``TokenStream``, which keeps one token of lookahead
and the current line number for diagnostics.

Expressions are deliberately flat: every infix operator, indexing
included, has the same precedence and binds left to right, so
``1 + 2 * 3`` is ``(1 + 2) * 3``.
"""

from __future__ import annotations

import io
import re
import string
from dataclasses import dataclass
from typing import Iterator, List, Optional, TextIO, Union

from .ast import (
    Expr, LiteralInt, SequenceInit, Variable, BinaryOp, Len,
    Stmt, Print, Compound, If, While, Assignment, Push, Program,
)
from .errors import ParseError

MAX_TOKEN = 1023
MAX_VAR_NAME = 20

RESERVED_WORDS = frozenset({'if', 'while', 'print', 'push', 'len'})
INFIX_OPERATORS = frozenset({'+', '-', '*', '/', '<', '==', '&&', '||', '['})
EXPR_TERMINATORS = frozenset({';', ')', ']', ','})
TWO_CHAR_OPERATORS = frozenset({'==', '&&', '||'})

IDENT_START = frozenset(string.ascii_letters + '_')
IDENT_CHARS = frozenset(string.ascii_letters + string.digits + '_')
DIGITS = frozenset(string.digits)
WHITESPACE = frozenset(' \t\n\r\f\v')
ESCAPES = {'n': '\n', 't': '\t', '"': '"', '\\': '\\'}

INT_PATTERN = re.compile(r'-?[0-9]+')


###############################################################################
# Tokenizer
###############################################################################

@dataclass
class Token:
    text: str
    line: int

    @property
    def kind(self) -> str:
        first = self.text[0]
        if first in IDENT_START:
            return 'IDENT'
        if first == '-' or first in DIGITS:
            return 'INT'
        if first == '\'':
            return 'CHAR'
        if first == '"':
            return 'STRING'
        return 'OP'


class TokenStream:
    """Reads tokens from a text stream with one token of lookahead.

    Whitespace and ``#`` comments are skipped. Quoted literals are
    decoded as they are read, so a token's text holds the literal's
    characters between its original quote delimiters.
    """

    def __init__(self, fp: TextIO):
        self.fp = fp
        self.line = 1
        self._pending_char: Optional[str] = None
        self._current: Optional[Token] = None
        self._loaded = False

    # Character level

    def _getc(self) -> str:
        if self._pending_char is not None:
            ch, self._pending_char = self._pending_char, None
            return ch
        return self.fp.read(1)

    def _ungetc(self, ch: str) -> None:
        if ch:
            self._pending_char = ch

    def _add(self, chars: List[str], ch: str) -> None:
        if len(chars) >= MAX_TOKEN:
            raise ParseError(self.line, 'token too long')
        chars.append(ch)

    def _read_token(self) -> Optional[Token]:
        ch = self._getc()
        while ch in WHITESPACE or ch == '#':
            if ch == '#':
                ch = self._getc()
                while ch and ch != '\n':
                    ch = self._getc()
            if ch == '\n':
                self.line += 1
            if not ch:
                break
            ch = self._getc()
        if not ch:
            return None

        line = self.line
        chars = [ch]
        if ch in IDENT_START:
            ch = self._getc()
            while ch in IDENT_CHARS:
                self._add(chars, ch)
                ch = self._getc()
            self._ungetc(ch)
        elif ch == '-' or ch in DIGITS:
            ch = self._getc()
            while ch in DIGITS:
                self._add(chars, ch)
                ch = self._getc()
            self._ungetc(ch)
        elif ch in ('"', '\''):
            self._read_quoted(chars, ch)
        else:
            ch2 = self._getc()
            if ch + ch2 in TWO_CHAR_OPERATORS:
                chars.append(ch2)
            else:
                self._ungetc(ch2)
        return Token(''.join(chars), line)

    def _read_quoted(self, chars: List[str], quote: str) -> None:
        escape = False
        while True:
            ch = self._getc()
            if not ch or ch == '\n':
                raise ParseError(self.line, 'invalid string literal.')
            if escape:
                if ch not in ESCAPES:
                    raise ParseError(self.line, f'Invalid escape sequence "\\{ch}"')
                self._add(chars, ESCAPES[ch])
                escape = False
            elif ch == '\\':
                escape = True
            elif ch == quote:
                break
            else:
                self._add(chars, ch)
        self._add(chars, quote)
        if quote == '\'' and len(chars) != 3:
            raise ParseError(self.line, 'Invalid single-quoted string')

    # Token level

    def peek(self) -> Optional[Token]:
        if not self._loaded:
            self._current = self._read_token()
            self._loaded = True
        return self._current

    def advance(self) -> Optional[Token]:
        token = self.peek()
        self._loaded = False
        self._current = None
        return token

    def expect(self) -> Token:
        """Consume and return the next token; running out is a syntax error."""
        token = self.advance()
        if token is None:
            raise ParseError(self.line)
        return token

    def require(self, text: str) -> Token:
        token = self.expect()
        if token.text != text:
            raise ParseError(token.line)
        return token

    def at(self, text: str) -> bool:
        token = self.peek()
        return token is not None and token.text == text


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens."""
    stream = TokenStream(io.StringIO(source))
    tokens: List[Token] = []
    while stream.peek() is not None:
        tokens.append(stream.advance())
    return tokens


###############################################################################
# Parser implementation
###############################################################################


def is_identifier(text: str) -> bool:
    """True if ``text`` can name a variable."""
    if text[0] not in IDENT_START:
        return False
    if any(ch not in IDENT_CHARS for ch in text[1:]):
        return False
    if len(text) > MAX_VAR_NAME:
        return False
    return text not in RESERVED_WORDS


class Parser:
    def __init__(self, stream: Union[TokenStream, TextIO, str]):
        if isinstance(stream, str):
            stream = io.StringIO(stream)
        if not isinstance(stream, TokenStream):
            stream = TokenStream(stream)
        self.tokens = stream

    def syntax_error(self, token: Optional[Token] = None) -> ParseError:
        return ParseError(token.line if token is not None else self.tokens.line)

    def has_next(self) -> bool:
        return self.tokens.peek() is not None

    def __iter__(self) -> Iterator[Stmt]:
        while self.has_next():
            yield self.parse_statement()

    def parse_program(self) -> Program:
        return Program(list(self))

    def parse_statement(self) -> Stmt:
        token = self.tokens.expect()
        text = token.text

        if text == '{':
            statements: List[Stmt] = []
            while not self.tokens.at('}'):
                if not self.has_next():
                    raise self.syntax_error()
                statements.append(self.parse_statement())
            self.tokens.advance()
            return Compound(statements)

        if text == 'print':
            expr = self.parse_expression()
            self.tokens.require(';')
            return Print(expr)

        if text in ('if', 'while'):
            self.tokens.require('(')
            condition = self.parse_expression()
            self.tokens.require(')')
            body = self.parse_statement()
            return If(condition, body) if text == 'if' else While(condition, body)

        if text == 'push':
            return self.parse_push()

        if is_identifier(text):
            nxt = self.tokens.expect()
            if nxt.text == '=':
                expr = self.parse_expression()
                self.tokens.require(';')
                return Assignment(text, None, expr)
            if nxt.text == '[':
                index = self.parse_expression()
                self.tokens.require(']')
                self.tokens.require('=')
                expr = self.parse_expression()
                self.tokens.require(';')
                return Assignment(text, index, expr)
            raise self.syntax_error(nxt)

        raise self.syntax_error(token)

    def parse_push(self) -> Push:
        # Both `push s, v;` and `push(s, v);` are accepted.
        if self.tokens.at('('):
            self.tokens.advance()
            sequence = self.parse_expression()
            closer = self.tokens.expect()
            if closer.text == ',':
                value = self.parse_expression()
                self.tokens.require(')')
                self.tokens.require(';')
                return Push(sequence, value)
            if closer.text != ')':
                raise self.syntax_error(closer)
            # The parenthesis only grouped the first operand.
            sequence = self.parse_infix_tail(sequence)
        else:
            sequence = self.parse_expression()
        self.tokens.require(',')
        value = self.parse_expression()
        self.tokens.require(';')
        return Push(sequence, value)

    def parse_expression(self) -> Expr:
        if self.tokens.at('len'):
            self.tokens.advance()
            return Len(self.parse_expression())
        return self.parse_infix_tail(self.parse_term())

    def parse_infix_tail(self, left: Expr) -> Expr:
        """Fold trailing infix operators onto ``left``, strictly left to right."""
        while True:
            op = self.tokens.peek()
            if op is None or op.text not in INFIX_OPERATORS:
                break
            self.tokens.advance()
            right = self.parse_term()
            if op.text == '[':
                self.tokens.require(']')
            left = BinaryOp(op.text, left, right)

        # An expression has to end at one of ; ) ] , and the caller consumes it.
        end = self.tokens.peek()
        if end is None or end.text not in EXPR_TERMINATORS:
            raise self.syntax_error(end)
        return left

    def parse_term(self) -> Expr:
        if self.tokens.at('len'):
            return self.parse_expression()

        token = self.tokens.expect()
        text = token.text
        kind = token.kind

        if text == '(':
            expr = self.parse_expression()
            self.tokens.require(')')
            return expr
        if kind == 'INT':
            if not INT_PATTERN.fullmatch(text):
                raise self.syntax_error(token)
            return LiteralInt(int(text))
        if kind == 'CHAR':
            return LiteralInt(ord(text[1]))
        if kind == 'STRING':
            return SequenceInit([LiteralInt(ord(ch)) for ch in text[1:-1]])
        if is_identifier(text):
            return Variable(text)
        if text == '[':
            elements: List[Expr] = []
            if self.tokens.at(']'):
                self.tokens.advance()
                return SequenceInit(elements)
            while True:
                elements.append(self.parse_expression())
                sep = self.tokens.expect()
                if sep.text == ']':
                    return SequenceInit(elements)
                if sep.text != ',':
                    raise self.syntax_error(sep)
        raise self.syntax_error(token)


def parse_program(source: Union[str, TextIO]) -> Program:
    """Parse a whole program from a string or text stream."""
    return Parser(source).parse_program()
