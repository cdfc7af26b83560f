"""Stack element types and the stack view used by the evaluator."""

from __future__ import annotations

import numbers
from collections.abc import MutableSequence
from dataclasses import dataclass
from functools import lru_cache

import jax.numpy as jnp

from .errors import ArithmeticOverflowError, ElementTypeError


@dataclass(frozen=True)
class ElementType:
    """Signed fixed-width integer type shared by both stacks."""

    name: str
    bits: int
    min: int
    max: int

    def contains(self, value: int) -> bool:
        return self.min <= value <= self.max

    def check(self, value: int, *, start: int = 0, end: int = 0, where: str = "push") -> int:
        if not self.contains(value):
            raise ArithmeticOverflowError(value, self.name, start=start, end=end, where=where)
        return value


@lru_cache(maxsize=None)
def element_type(dtype: object) -> ElementType:
    try:
        resolved = jnp.dtype(dtype)
    except TypeError as exc:
        raise ElementTypeError(f"Unknown stack element type {dtype!r}") from exc
    if not jnp.issubdtype(resolved, jnp.signedinteger):
        raise ElementTypeError(
            f"Stack element type must be a signed integer dtype, got {resolved.name}"
        )
    info = jnp.iinfo(resolved)
    return ElementType(name=resolved.name, bits=int(info.bits), min=int(info.min), max=int(info.max))


def validate_items(items: MutableSequence[int], kind: ElementType, *, where: str) -> None:
    for idx, value in enumerate(items):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise TypeError(f"{where}[{idx}] has unsupported runtime type {type(value).__name__}")
        kind.check(int(value), where=f"{where}[{idx}]")


class Stack:
    """View over a caller-owned list; the list's end is the stack top."""

    __slots__ = ("items", "kind")

    def __init__(self, items: MutableSequence[int], kind: ElementType) -> None:
        self.items = items
        self.kind = kind

    def push(self, value: int, *, start: int = 0, end: int = 0) -> int:
        self.items.append(self.kind.check(value, start=start, end=end))
        return value

    def pop(self) -> int:
        if not self.items:
            return 0
        return int(self.items.pop())

    def peek(self) -> int | None:
        if not self.items:
            return None
        return int(self.items[-1])

    @property
    def height(self) -> int:
        return len(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def snapshot(self) -> list[int]:
        return [int(value) for value in self.items]

    def __repr__(self) -> str:
        return f"Stack({self.snapshot()!r}, {self.kind.name})"
