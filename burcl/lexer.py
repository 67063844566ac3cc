"""Tokenizer for B source text."""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum, auto

END_OF_FILE_TEXT = "end of file"


class TokenType(Enum):
    """Kinds of tokens produced by the lexer."""

    NUMBER = auto()
    STRING = auto()
    IDENT = auto()
    CHAR = auto()
    INVALID = auto()
    END_OF_FILE = auto()
    RETURN = auto()
    AUTO = auto()
    EXTRN = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    EQUAL = auto()
    COMMA = auto()
    AMPERSAND = auto()
    SEMICOLON = auto()
    OPENPAREN = auto()
    CLOSEPAREN = auto()
    OPENBRACE = auto()
    CLOSEBRACE = auto()


@dataclass(frozen=True)
class Token:
    """A single lexical token and the line it ended on."""

    type: TokenType
    value: str
    line: int


_KEYWORDS = {
    "return": TokenType.RETURN,
    "auto": TokenType.AUTO,
    "extrn": TokenType.EXTRN,
}

_OPERATORS = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "{": TokenType.OPENBRACE,
    "}": TokenType.CLOSEBRACE,
    "(": TokenType.OPENPAREN,
    ")": TokenType.CLOSEPAREN,
    ",": TokenType.COMMA,
    "=": TokenType.EQUAL,
    "&": TokenType.AMPERSAND,
}

_WHITESPACE = frozenset(" \r\n")
_QUOTES = frozenset("'\"")
_LETTERS = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)
_NUL = "\0"


def _starts_ident(c: str) -> bool:
    return c in _LETTERS or c == "_"


def _continues_ident(c: str) -> bool:
    return c in _LETTERS or c in _DIGITS or c == "_"


class _Lexer:
    def __init__(self, source: str) -> None:
        self._source = source
        self._index = 0
        self._line = 1
        self._tokens: list[Token] = []

    def _at(self) -> str:
        if self._index < len(self._source):
            return self._source[self._index]
        return _NUL

    def _advance(self) -> None:
        if self._at() == "\n":
            self._line += 1
        self._index += 1

    def _eat(self) -> str:
        c = self._at()
        self._advance()
        return c

    def _push(self, kind: TokenType, value: str) -> None:
        self._tokens.append(Token(kind, value, self._line))

    def _lex_string(self) -> None:
        quote = self._eat()
        kind = TokenType.CHAR if quote == "'" else TokenType.STRING
        chars = []
        while (c := self._at()) != quote and c != _NUL:
            chars.append(self._eat())
        if self._eat() == _NUL:
            self._push(TokenType.INVALID, END_OF_FILE_TEXT)
            return
        self._push(kind, "".join(chars))

    def _lex_number(self) -> None:
        digits = []
        while self._at() in _DIGITS:
            digits.append(self._eat())
        self._push(TokenType.NUMBER, "".join(digits))

    def _lex_ident(self) -> None:
        chars = [self._eat()]
        while _continues_ident(self._at()):
            chars.append(self._eat())
        ident = "".join(chars)
        self._push(_KEYWORDS.get(ident, TokenType.IDENT), ident)

    def _lex_operator(self) -> None:
        c = self._eat()
        self._push(_OPERATORS.get(c, TokenType.INVALID), c)

    def run(self) -> list[Token]:
        while self._index < len(self._source):
            c = self._at()
            if c in _WHITESPACE:
                self._advance()
            elif c in _QUOTES:
                self._lex_string()
            elif _starts_ident(c):
                self._lex_ident()
            elif c in _DIGITS:
                self._lex_number()
            else:
                self._lex_operator()
        self._push(TokenType.END_OF_FILE, END_OF_FILE_TEXT)
        return self._tokens


def read_everything(path) -> str:
    """Return the whole text of a file, or an empty string if it cannot be read."""
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            return handle.read()
    except OSError:
        return ""


def tokenize(source: str) -> list[Token]:
    """Split source text into tokens, always ending with an END_OF_FILE token."""
    return _Lexer(source).run()


def tokenize_file(path) -> list[Token]:
    """Tokenize the contents of the file at ``path``."""
    return tokenize(read_everything(path))