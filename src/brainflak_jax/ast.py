"""Operation tree nodes for Brain-Flak programs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Inc:
    """``()``: contributes 1."""

    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Height:
    """``[]``: contributes the active stack height."""

    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True)
class PopAdd:
    """``{}``: pops the active stack and contributes the popped value."""

    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Toggle:
    """``<>``: switches the active stack for good."""

    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Push:
    body: tuple["Node", ...]
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Negate:
    body: tuple["Node", ...]
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Loop:
    body: tuple["Node", ...]
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Scoped:
    body: tuple["Node", ...]
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)


@dataclass(frozen=True)
class Program:
    body: tuple["Node", ...]


Nilad = Union[Inc, Height, PopAdd, Toggle]
Monad = Union[Push, Negate, Loop, Scoped]
Node = Union[Inc, Height, PopAdd, Toggle, Push, Negate, Loop, Scoped]
Sequence = tuple[Node, ...]

NILAD_TEXT: dict[type, str] = {Inc: "()", Height: "[]", PopAdd: "{}", Toggle: "<>"}
MONAD_BRACKETS: dict[type, tuple[str, str]] = {
    Push: ("(", ")"),
    Negate: ("[", "]"),
    Loop: ("{", "}"),
    Scoped: ("<", ">"),
}


def node_count(nodes: Sequence) -> int:
    total = 0
    for node in nodes:
        total += 1
        body = getattr(node, "body", None)
        if body is not None:
            total += node_count(body)
    return total


def render(nodes: Sequence | Program) -> str:
    """Render a tree back to canonical bracket text."""
    if isinstance(nodes, Program):
        nodes = nodes.body
    parts: list[str] = []
    for node in nodes:
        text = NILAD_TEXT.get(type(node))
        if text is not None:
            parts.append(text)
            continue
        opener, closer = MONAD_BRACKETS[type(node)]
        parts.append(f"{opener}{render(node.body)}{closer}")
    return "".join(parts)
