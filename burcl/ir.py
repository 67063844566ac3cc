"""Intermediate representation generator for tokenized B source."""

from __future__ import annotations

import string
import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Optional, Union

from .lexer import END_OF_FILE_TEXT, Token, TokenType


class IRType(IntEnum):
    """Operations of the intermediate representation."""

    LOAD_NUMBER = 0
    LOAD_STACK = 1
    DEREF = 2
    ASSIGN = 3
    ADD = 4
    SUB = 5
    MUL = 6
    DIV = 7


IRValue = Union[IRType, str]


@dataclass
class IRInfo:
    """Result of generation: code per label plus the string table."""

    labels: dict[str, list[IRValue]] = field(default_factory=dict)
    referencing: list[str] = field(default_factory=list)
    strings: list[str] = field(default_factory=list)
    string_ptr: int = 0


_NO_LABEL = "?"

_SIMPLE_ESCAPES = {
    "n": ord("\n"),
    "t": ord("\t"),
    "r": ord("\r"),
    "0": 0,
    "\\": ord("\\"),
    "'": ord("'"),
    '"': ord('"'),
    "b": ord("\b"),
    "f": ord("\f"),
    "v": ord("\v"),
    "a": ord("\a"),
}

_HEX_DIGITS = frozenset(string.hexdigits)

_OPERATOR_OPS = {
    TokenType.PLUS: IRType.ADD,
    TokenType.MINUS: IRType.SUB,
    TokenType.STAR: IRType.MUL,
    TokenType.SLASH: IRType.DIV,
}

ErrorHandler = Callable[[str], None]


def _leading_hex(digits: str) -> int:
    prefix = []
    for c in digits:
        if c not in _HEX_DIGITS:
            break
        prefix.append(c)
    if not prefix:
        raise ValueError(f"invalid hex digits in escape: {digits!r}")
    return int("".join(prefix), 16)


def _hex_escape(text: str, i: int, width: int, message: str, on_error: ErrorHandler):
    if i + width >= len(text):
        on_error(message)
        return 0, i + 1
    value = _leading_hex(text[i + 1 : i + 1 + width])
    return value & 0xFF, i + width + 1


def _parse_escape(text: str, i: int, on_error: ErrorHandler) -> tuple[int, int]:
    """Decode one character at ``i``; return its code and the index after it."""
    if i >= len(text):
        return 0, i + 1
    if text[i] != "\\":
        return ord(text[i]), i + 1
    i += 1
    if i >= len(text):
        on_error("incomplete escape sequence")
        return 0, i + 1
    code = text[i]
    if code in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[code], i + 1
    if code == "x":
        return _hex_escape(text, i, 2, "incomplete hex escape", on_error)
    if code == "u":
        return _hex_escape(text, i, 4, "incomplete unicode escape", on_error)
    on_error(f"unknown escape sequence: \\{code}")
    return 0, i + 1


def _unescape(text: str, on_error: ErrorHandler) -> str:
    out = []
    i = 0
    while i < len(text):
        if text[i] == "\\":
            code, i = _parse_escape(text, i, on_error)
            out.append(chr(code))
        else:
            out.append(text[i])
            i += 1
    return "".join(out)


def _raise_value_error(message: str) -> None:
    raise ValueError(message)


def unescape_string(text: str) -> str:
    """Replace backslash escapes in ``text``; raise ValueError on a bad escape."""
    return _unescape(text, _raise_value_error)


class IRGenerator:
    """Turns a token list into labelled IR, collecting errors as it goes."""

    def __init__(self, source_name: str = "") -> None:
        self.source_name = source_name
        self._reset([])

    def _reset(self, tokens) -> None:
        self._tokens: list[Token] = list(tokens)
        if not self._tokens or self._tokens[-1].type is not TokenType.END_OF_FILE:
            line = self._tokens[-1].line if self._tokens else 1
            self._tokens.append(Token(TokenType.END_OF_FILE, END_OF_FILE_TEXT, line))
        self._index = 0
        self._info = IRInfo()
        self._errors: list[str] = []
        self._label = _NO_LABEL
        self._params: dict[str, int] = {}
        self._scopes: list[dict[str, int]] = []
        self._size_stack: list[int] = []
        self._locals_size = 0

    # Token access

    def _at(self) -> Token:
        return self._tokens[self._index]

    def _type(self) -> TokenType:
        return self._at().type

    def _advance(self) -> None:
        if self._type() is not TokenType.END_OF_FILE:
            self._index += 1

    def _eat(self) -> Token:
        current = self._at()
        self._advance()
        return current

    def _peek(self, offset: int = 1) -> Token:
        position = min(max(self._index + offset, 0), len(self._tokens) - 1)
        return self._tokens[position]

    def _expect(self, kind: TokenType, message: str) -> Token:
        current = self._eat()
        if current.type is not kind:
            self._error(f"{message}, got '{current.value}'")
        return current

    def _eat_operator(self) -> IRType:
        return _OPERATOR_OPS.get(self._eat().type, IRType.LOAD_NUMBER)

    # Emission

    def _add_label(self, label: str) -> None:
        self._info.labels[label] = []
        self._label = label

    def _emit(self, *values: IRValue) -> None:
        if self._label == _NO_LABEL:
            return
        self._info.labels[self._label].extend(values)

    # Errors

    def _error(self, message: str) -> None:
        where = self._at() if self._index == 0 else self._peek(-1)
        self._errors.append(
            f"[ERROR]: {self._label}: {self.source_name}:{where.line}: {message}\n"
        )

    def has_errors(self) -> bool:
        """Whether the last generation reported any error."""
        return bool(self._errors)

    def error_text(self) -> str:
        """All error lines of the last generation."""
        return "".join(self._errors)

    def print_errors(self) -> bool:
        """Write errors to stdout; return whether there were any."""
        if self._errors:
            sys.stdout.write(self.error_text())
        return self.has_errors()

    # Locals

    def _get_local(self, name: str, report: bool = True) -> Optional[int]:
        for scope in reversed(self._scopes):
            if name in scope:
                return -scope[name]
        if name in self._params:
            return self._params[name]
        if report:
            self._error(f"local '{name}' does not exist")
        return None

    def _push_local(self, name: str) -> None:
        if not self._scopes:
            self._error(f"variable '{name}' declared outside of a function")
            return
        self._scopes[-1][name] = self._locals_size
        self._locals_size += 1

    def _push_block(self) -> None:
        self._size_stack.append(self._locals_size)
        self._scopes.append({})

    def _pop_block(self) -> None:
        self._locals_size = self._size_stack.pop()
        self._scopes.pop()

    # Expressions

    def _gen_primary(self) -> None:
        current = self._eat()
        if current.type is TokenType.NUMBER:
            self._emit(IRType.LOAD_NUMBER, current.value)
        elif current.type is TokenType.STRING:
            offset = self._info.string_ptr
            self._info.strings.append(_unescape(current.value, self._error))
            self._info.string_ptr += len(current.value)
            self._emit(IRType.LOAD_NUMBER, str(offset))
        elif current.type is TokenType.CHAR:
            code, _ = _parse_escape(current.value, 0, self._error)
            self._emit(IRType.LOAD_NUMBER, str(code))
        elif current.type is TokenType.IDENT:
            offset = self._get_local(current.value)
            if offset is not None:
                self._emit(IRType.LOAD_STACK, str(offset))
        else:
            self._error(f"unexpected symbol '{current.value}'")

    def _gen_mult(self) -> None:
        self._gen_primary()
        while self._type() in (TokenType.STAR, TokenType.SLASH):
            op = self._eat_operator()
            self._gen_primary()
            self._emit(op)

    def _gen_add(self) -> None:
        self._gen_mult()
        while self._type() in (TokenType.PLUS, TokenType.MINUS):
            op = self._eat_operator()
            self._gen_mult()
            self._emit(op)

    def _gen_expr(self) -> None:
        self._gen_add()

    # Statements

    def _gen_function(self) -> None:
        self._add_label(self._eat().value)
        self._advance()
        self._params.clear()

        count = 1
        params: list[str] = []

        if self._type() is not TokenType.CLOSEPAREN:
            ident = self._expect(TokenType.IDENT, "invalid parameter #1")
            if ident.type is TokenType.IDENT:
                params.append(ident.value)
            count += 1

        while self._type() not in (TokenType.CLOSEPAREN, TokenType.END_OF_FILE):
            self._expect(TokenType.COMMA, f"expected ',' beside paremeter #{count - 1}")
            ident = self._expect(TokenType.IDENT, f"invalid parameter #{count}")
            if ident.type is TokenType.IDENT:
                params.append(ident.value)
            count += 1

        self._expect(TokenType.CLOSEPAREN, "expected ')' when closing parameters")
        if len(params) != count - 1:
            return

        for position, name in enumerate(params):
            self._params[name] = len(params) - position

        self._gen_block()

    def _gen_block(self) -> None:
        self._expect(TokenType.OPENBRACE, "expected '{' when opening scope")
        self._push_block()
        while self._type() not in (TokenType.CLOSEBRACE, TokenType.END_OF_FILE):
            self._gen_stmt()
        self._pop_block()
        self._expect(TokenType.CLOSEBRACE, "expected '}' when closing scope")

    def _gen_var_decl(self) -> None:
        name = self._eat().value
        offset = self._get_local(name, report=False)
        self._advance()
        if offset is not None:
            self._gen_expr()
            self._emit(IRType.ASSIGN, str(offset))
        else:
            self._push_local(name)
            self._gen_expr()

    def _gen_decl(self) -> None:
        following = self._peek(1)
        if following.type is TokenType.OPENPAREN:
            self._gen_function()
        elif following.type is TokenType.EQUAL:
            self._gen_var_decl()
        else:
            self._advance()
            self._error("expected declaration")

    def _gen_stmt(self) -> None:
        if self._type() is TokenType.IDENT:
            self._gen_decl()
            return
        self._error("expected declaration")
        self._gen_expr()

    def generate(self, tokens) -> IRInfo:
        """Generate IR for a token list, replacing any previous result and errors."""
        self._reset(tokens)
        while self._type() is not TokenType.END_OF_FILE:
            self._gen_stmt()
        return self._info