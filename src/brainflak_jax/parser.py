"""Bracket-nesting parser for Brain-Flak."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .ast import Height, Inc, Loop, Negate, Node, PopAdd, Program, Push, Scoped, Toggle
from .lexer import Token, tokenize, tokens_from_stream

_CLOSER_FOR = {
    "LPAREN": "RPAREN",
    "LBRACK": "RBRACK",
    "LBRACE": "RBRACE",
    "LANGLE": "RANGLE",
}
_MONAD_FOR = {
    "LPAREN": Push,
    "LBRACK": Negate,
    "LBRACE": Loop,
    "LANGLE": Scoped,
}
_NILAD_FOR = {
    "()": Inc,
    "[]": Height,
    "{}": PopAdd,
}


class ParseError(SyntaxError):
    def __init__(
        self,
        message: str,
        start: int,
        end: int,
        expected: tuple[str, ...] = (),
        found: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end
        self.expected = expected
        self.found = found

    def __str__(self) -> str:
        expected_text = ""
        if self.expected:
            expected_text = f"; expected {', '.join(self.expected)}"
        found_text = ""
        if self.found is not None:
            found_text = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected_text}{found_text}"


class UnterminatedGroupError(ParseError):
    """End of input reached while groups were still open."""


@dataclass
class _Frame:
    opener: Token
    content: list[Node] = field(default_factory=list)


@dataclass
class _Parser:
    tokens: list[Token]
    index: int = 0

    def parse_program(self) -> Program:
        root: list[Node] = []
        frames: list[_Frame] = []

        while self._peek().kind != "EOF":
            tok = self._advance()
            target = frames[-1].content if frames else root

            if tok.kind == "NILAD":
                target.append(_NILAD_FOR[tok.text](start=tok.pos, end=tok.end))
                continue

            if tok.kind == "LANGLE" and self._peek().kind == "RANGLE":
                closer = self._advance()
                target.append(Toggle(start=tok.pos, end=closer.end))
                continue

            if tok.kind in _CLOSER_FOR:
                frames.append(_Frame(opener=tok))
                continue

            if not frames:
                self._error(tok, message="Unmatched closing bracket")
            frame = frames.pop()
            expected_kind = _CLOSER_FOR[frame.opener.kind]
            if tok.kind != expected_kind:
                self._error(tok, message="Mismatched closing bracket", expected=(expected_kind,))
            monad = _MONAD_FOR[frame.opener.kind]
            node = monad(body=tuple(frame.content), start=frame.opener.pos, end=tok.end)
            (frames[-1].content if frames else root).append(node)

        if frames:
            opener = frames[-1].opener
            raise UnterminatedGroupError(
                f"Unterminated {opener.text!r} group",
                opener.pos,
                opener.end,
                expected=(_CLOSER_FOR[opener.kind],),
                found="EOF",
            )
        return Program(body=tuple(root))

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        tok = self.tokens[self.index]
        self.index += 1
        return tok

    def _error(self, tok: Token, *, message: str, expected: tuple[str, ...] = ()) -> None:
        found = "EOF" if tok.kind == "EOF" else f"{tok.kind}({tok.text})"
        raise ParseError(message, tok.pos, tok.end, expected=expected, found=found)


def parse(source: str) -> Program:
    tokens = tokenize(source)
    parser = _Parser(tokens=tokens)
    return parser.parse_program()


def parse_program(source: str) -> Program:
    return parse(source)


def parse_tokens(stream: Iterable[str]) -> Program:
    """Parse a pre-split bracket stream such as ``["(", "<>", ")"]``."""
    tokens = tokens_from_stream(stream)
    parser = _Parser(tokens=tokens)
    return parser.parse_program()
