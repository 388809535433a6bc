"""
Parser for the OpenSCAD subset that scaddots emits.

Used to compare generated scripts structurally rather than byte by byte.
Supports:
- Module calls with positional and named arguments (``cube(size=1)``)
- Child blocks (``union() { ... }``) and single children
  (``translate([1,0,0]) cube(1);``)
- Top-level assignments (``$fn = 20;``)
- Numbers, booleans, strings and nested vectors
- Single-line (//) and multi-line (/* */) comments
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

from scaddots.errors import ParseError

__all__ = ["TokenType", "Token", "Lexer", "Parser", "ScadNode",
           "tokenize", "parse_scad", "scad_relative_eq"]


class TokenType(Enum):
    IDENT = "ident"
    NUMBER = "number"
    STRING = "string"
    PUNCT = "punct"
    EOF = "eof"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Any
    offset: int


PUNCTUATION = "()[]{},;="


class Lexer:
    """
    Tokenizer for OpenSCAD source.

    Usage:
        tokens = Lexer(text).tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        ch = self._peek()
        self.pos += 1
        return ch

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _skip_space_and_comments(self) -> None:
        while not self._is_at_end():
            ch = self._peek()
            if ch.isspace():
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                while self._peek() != '\n' and not self._is_at_end():
                    self._advance()
            elif ch == '/' and self._peek(1) == '*':
                start = self.pos
                self.pos += 2
                while not (self._peek() == '*' and self._peek(1) == '/'):
                    if self._is_at_end():
                        raise ParseError("unterminated comment", start)
                    self._advance()
                self.pos += 2
            else:
                return

    def _number(self) -> Token:
        start = self.pos
        if self._peek() in '+-':
            self._advance()
        while self._peek().isdigit():
            self._advance()
        if self._peek() == '.':
            self._advance()
            while self._peek().isdigit():
                self._advance()
        if self._peek() in 'eE' and (self._peek(1).isdigit()
                                     or (self._peek(1) in '+-' and self._peek(2).isdigit())):
            self._advance()
            if self._peek() in '+-':
                self._advance()
            while self._peek().isdigit():
                self._advance()
        text = self.source[start:self.pos]
        try:
            return Token(TokenType.NUMBER, float(text), start)
        except ValueError:
            raise ParseError(f"invalid number {text!r}", start) from None

    def _string(self) -> Token:
        start = self.pos
        self._advance()  # opening quote
        chars = []
        while self._peek() != '"':
            if self._is_at_end():
                raise ParseError("unterminated string", start)
            ch = self._advance()
            if ch == '\\':
                ch = self._advance()
            chars.append(ch)
        self._advance()  # closing quote
        return Token(TokenType.STRING, "".join(chars), start)

    def _ident(self) -> Token:
        start = self.pos
        self._advance()
        while self._peek().isalnum() or self._peek() == '_':
            self._advance()
        return Token(TokenType.IDENT, self.source[start:self.pos], start)

    def next_token(self) -> Token:
        self._skip_space_and_comments()
        if self._is_at_end():
            return Token(TokenType.EOF, None, self.pos)
        ch = self._peek()
        if ch.isdigit() or (ch == '.' and self._peek(1).isdigit()):
            return self._number()
        if ch in '+-' and (self._peek(1).isdigit() or self._peek(1) == '.'):
            return self._number()
        if ch.isalpha() or ch in '_$':
            return self._ident()
        if ch == '"':
            return self._string()
        if ch in PUNCTUATION:
            self._advance()
            return Token(TokenType.PUNCT, ch, self.pos - 1)
        raise ParseError(f"unexpected character {ch!r}", self.pos)

    def tokenize(self) -> List[Token]:
        tokens = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type is TokenType.EOF:
                return tokens


def tokenize(text: str) -> List[Token]:
    return Lexer(text).tokenize()


Arg = Tuple[Optional[str], Any]


@dataclass(frozen=True)
class ScadNode:
    """A module call (or an assignment, named ``"="``) with its children."""

    name: str
    args: Tuple[Arg, ...] = ()
    children: Tuple["ScadNode", ...] = ()

    def arg(self, key: Union[str, int]) -> Any:
        """Named argument by name, or positional argument by index."""
        if isinstance(key, int):
            positional = [v for k, v in self.args if k is None]
            return positional[key]
        for k, v in self.args:
            if k == key:
                return v
        raise KeyError(key)

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


class Parser:
    """
    Recursive descent parser over a token list.

    Usage:
        nodes = Parser(tokens).parse_program()
    """

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        return self.tokens[min(self.pos, len(self.tokens) - 1)]

    def _advance(self) -> Token:
        tok = self._current()
        if tok.type is not TokenType.EOF:
            self.pos += 1
        return tok

    def _check(self, punct: str) -> bool:
        tok = self._current()
        return tok.type is TokenType.PUNCT and tok.value == punct

    def _match(self, punct: str) -> bool:
        if self._check(punct):
            self._advance()
            return True
        return False

    def _expect(self, punct: str) -> Token:
        if not self._check(punct):
            tok = self._current()
            found = "end of input" if tok.type is TokenType.EOF else repr(tok.value)
            raise ParseError(f"expected {punct!r}, found {found}", tok.offset)
        return self._advance()

    # =========================================================================
    # Grammar
    # =========================================================================

    def parse_program(self) -> List[ScadNode]:
        nodes = []
        while self._current().type is not TokenType.EOF:
            node = self._statement()
            if node is not None:
                nodes.append(node)
        return nodes

    def _statement(self) -> Optional[ScadNode]:
        if self._match(';'):
            return None
        tok = self._current()
        if tok.type is not TokenType.IDENT:
            found = "end of input" if tok.type is TokenType.EOF else repr(tok.value)
            raise ParseError(f"expected a statement, found {found}", tok.offset)
        self._advance()

        if self._match('='):
            value = self._value()
            self._expect(';')
            return ScadNode("=", ((tok.value, value),))

        self._expect('(')
        args = self._arguments()
        self._expect(')')
        return ScadNode(tok.value, tuple(args), self._children())

    def _children(self) -> Tuple[ScadNode, ...]:
        if self._match(';'):
            return ()
        if self._match('{'):
            children = []
            while not self._match('}'):
                if self._current().type is TokenType.EOF:
                    raise ParseError("unterminated block", self._current().offset)
                node = self._statement()
                if node is not None:
                    children.append(node)
            return tuple(children)
        node = self._statement()
        return (node,) if node is not None else ()

    def _arguments(self) -> List[Arg]:
        args: List[Arg] = []
        if self._check(')'):
            return args
        while True:
            tok = self._current()
            nxt = self.tokens[min(self.pos + 1, len(self.tokens) - 1)]
            if (tok.type is TokenType.IDENT and nxt.type is TokenType.PUNCT
                    and nxt.value == '='):
                self._advance()
                self._advance()
                args.append((tok.value, self._value()))
            else:
                args.append((None, self._value()))
            if not self._match(','):
                return args

    def _value(self) -> Any:
        tok = self._current()
        if tok.type in (TokenType.NUMBER, TokenType.STRING):
            self._advance()
            return tok.value
        if tok.type is TokenType.IDENT and tok.value in ('true', 'false'):
            self._advance()
            return tok.value == 'true'
        if self._match('['):
            items = []
            if not self._check(']'):
                items.append(self._value())
                while self._match(','):
                    items.append(self._value())
            self._expect(']')
            return tuple(items)
        found = "end of input" if tok.type is TokenType.EOF else repr(tok.value)
        raise ParseError(f"expected a value, found {found}", tok.offset)


def parse_scad(text: str) -> List[ScadNode]:
    """Parse OpenSCAD text into top-level nodes.

    Raises :class:`ParseError` on input outside the supported subset.
    """
    return Parser(tokenize(text)).parse_program()


# -------------------------------------------------------------------
# structural comparison
# -------------------------------------------------------------------

def _values_eq(a, b, max_relative: float) -> bool:
    if isinstance(a, bool) or isinstance(b, bool):
        return a is b
    if isinstance(a, float) and isinstance(b, float):
        diff = abs(a - b)
        return diff <= 1e-12 or diff <= max_relative * max(abs(a), abs(b))
    if isinstance(a, tuple) and isinstance(b, tuple):
        return len(a) == len(b) and all(_values_eq(x, y, max_relative) for x, y in zip(a, b))
    return a == b


def _nodes_eq(a: ScadNode, b: ScadNode, max_relative: float) -> bool:
    if a.name != b.name or len(a.args) != len(b.args) or len(a.children) != len(b.children):
        return False
    for (ka, va), (kb, vb) in zip(a.args, b.args):
        if ka != kb or not _values_eq(va, vb, max_relative):
            return False
    return all(_nodes_eq(x, y, max_relative) for x, y in zip(a.children, b.children))


def scad_relative_eq(a: Union[str, Sequence[ScadNode]], b: Union[str, Sequence[ScadNode]],
                     max_relative: float = 1e-5) -> bool:
    """True if two scripts have the same structure and numbers equal to
    within ``max_relative``.  Comments and whitespace are ignored."""
    if isinstance(a, str):
        a = parse_scad(a)
    if isinstance(b, str):
        b = parse_scad(b)
    a, b = list(a), list(b)
    return len(a) == len(b) and all(_nodes_eq(x, y, max_relative) for x, y in zip(a, b))
