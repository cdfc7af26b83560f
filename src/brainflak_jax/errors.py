"""Structured error types for parser/runtime separation."""

from __future__ import annotations

from dataclasses import dataclass

from .parser import ParseError, UnterminatedGroupError


class BrainFlakError(Exception):
    """Base class for structured brainflak-jax errors."""


@dataclass(frozen=True)
class BrainFlakParseError(BrainFlakError):
    """Wraps parser failures with explicit parse-stage typing."""

    message: str
    start: int
    end: int
    expected: tuple[str, ...] = ()
    found: str | None = None
    unterminated: bool = False

    @classmethod
    def from_parse_error(cls, err: ParseError) -> "BrainFlakParseError":
        return cls(
            message=err.message,
            start=err.start,
            end=err.end,
            expected=err.expected,
            found=err.found,
            unterminated=isinstance(err, UnterminatedGroupError),
        )

    def __str__(self) -> str:
        expected = ""
        if self.expected:
            expected = f"; expected {', '.join(self.expected)}"
        found = ""
        if self.found is not None:
            found = f"; found {self.found}"
        return f"{self.message} at span [{self.start}, {self.end}){expected}{found}"


class BrainFlakRuntimeError(BrainFlakError):
    """Generic runtime failure after successful parse."""


class ArithmeticOverflowError(BrainFlakRuntimeError, OverflowError):
    """A value does not fit the configured stack element type."""

    def __init__(self, value: int, dtype: str, *, start: int = 0, end: int = 0, where: str = "push") -> None:
        super().__init__(f"{where} value {value} does not fit element type {dtype}")
        self.value = value
        self.dtype = dtype
        self.start = start
        self.end = end


class IterationLimitError(BrainFlakRuntimeError):
    """Loop bodies ran more often than the configured cap allows."""

    def __init__(self, limit: int, *, start: int = 0, end: int = 0) -> None:
        super().__init__(f"loop iteration limit of {limit} exceeded at span [{start}, {end})")
        self.limit = limit
        self.start = start
        self.end = end


class ElementTypeError(BrainFlakError, TypeError):
    """Stack element type is not a signed fixed-width integer."""


def classify_runtime_exception(err: Exception) -> BrainFlakError:
    """Best-effort runtime error classification for structured APIs."""
    if isinstance(err, BrainFlakError):
        return err
    if isinstance(err, RecursionError):
        return BrainFlakRuntimeError(f"program nesting too deep: {err}")
    if isinstance(err, OverflowError):
        return BrainFlakRuntimeError(f"arithmetic overflow: {err}")
    return BrainFlakRuntimeError(str(err))
