"""Tokenization for Brain-Flak bracket source."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int
    end: int


_OPEN_TOKENS = {
    "(": "LPAREN",
    "[": "LBRACK",
    "{": "LBRACE",
    "<": "LANGLE",
}
_CLOSE_TOKENS = {
    ")": "RPAREN",
    "]": "RBRACK",
    "}": "RBRACE",
    ">": "RANGLE",
}
_SINGLE_TOKENS = {**_OPEN_TOKENS, **_CLOSE_TOKENS}

# `<>` is resolved by the parser with one token of lookahead.
_FUSED_NILADS = {"(": ")", "[": "]", "{": "}"}

_WHITESPACE = set(" \t\r\n\f\v")


def _skip_trivia(source: str, start: int) -> int:
    i = start
    while i < len(source):
        ch = source[i]
        if ch in _WHITESPACE:
            i += 1
            continue
        if ch == "#":
            newline = source.find("\n", i)
            i = len(source) if newline < 0 else newline + 1
            continue
        break
    return i


def _unexpected(text: str, pos: int) -> SyntaxError:
    from .parser import ParseError

    return ParseError(f"Unexpected character {text!r}", pos, pos + len(text), found=repr(text))


def tokenize(source: str) -> list[Token]:
    tokens: list[Token] = []
    i = _skip_trivia(source, 0)
    while i < len(source):
        ch = source[i]

        if ch in _FUSED_NILADS:
            j = _skip_trivia(source, i + 1)
            if j < len(source) and source[j] == _FUSED_NILADS[ch]:
                tokens.append(Token("NILAD", ch + source[j], i, j + 1))
                i = _skip_trivia(source, j + 1)
                continue

        if ch in _SINGLE_TOKENS:
            tokens.append(Token(_SINGLE_TOKENS[ch], ch, i, i + 1))
            i = _skip_trivia(source, i + 1)
            continue

        raise _unexpected(ch, i)

    tokens.append(Token("EOF", "", len(source), len(source)))
    return tokens


def tokens_from_stream(stream: Iterable[str]) -> list[Token]:
    """Build tokens from an already split bracket stream.

    Items may be single brackets, the doubled angles ``<<`` / ``>>`` or one of
    the nilads ``()``, ``[]``, ``{}``, ``<>``. Positions are item indices.
    """
    tokens: list[Token] = []
    count = 0
    for index, item in enumerate(stream):
        if item in _SINGLE_TOKENS:
            tokens.append(Token(_SINGLE_TOKENS[item], item, index, index + 1))
        elif item in {"<<", ">>"}:
            kind = _SINGLE_TOKENS[item[0]]
            tokens.append(Token(kind, item[0], index, index + 1))
            tokens.append(Token(kind, item[0], index, index + 1))
        elif item == "<>":
            tokens.append(Token("LANGLE", "<", index, index + 1))
            tokens.append(Token("RANGLE", ">", index, index + 1))
        elif len(item) == 2 and _FUSED_NILADS.get(item[0]) == item[1]:
            tokens.append(Token("NILAD", item, index, index + 1))
        else:
            raise _unexpected(item, index)
        count = index + 1
    tokens.append(Token("EOF", "", count, count))
    return tokens
