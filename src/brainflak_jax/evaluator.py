"""Dual-stack evaluator for Brain-Flak operation trees."""

from __future__ import annotations

import logging
import os
from collections.abc import MutableSequence
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Final, overload

from .ast import Height, Inc, Loop, Negate, Node, PopAdd, Program, Push, Scoped, Toggle, node_count
from .errors import ArithmeticOverflowError, BrainFlakError, BrainFlakParseError, IterationLimitError, classify_runtime_exception
from .parser import ParseError, parse_program
from .values import ElementType, Stack, element_type, validate_items

logger = logging.getLogger(__name__)

_SCOPE_POLICIES: Final[tuple[str, ...]] = ("evaluate", "switch")
_DEFAULT_DTYPE: Final[str] = os.environ.get("BRAINFLAK_JAX_DEFAULT_DTYPE", "int32")
_DEFAULT_SCOPE: Final[str] = os.environ.get("BRAINFLAK_JAX_SCOPE_POLICY", "evaluate")
_DEFAULT_MAX_LOOP_ITERATIONS: Final[int] = max(0, int(os.environ.get("BRAINFLAK_JAX_MAX_LOOP_ITERATIONS", "0")))
_PROGRAM_CACHE_MAX: Final[int] = max(1, int(os.environ.get("BRAINFLAK_JAX_PROGRAM_CACHE_MAX", "256")))


@lru_cache(maxsize=_PROGRAM_CACHE_MAX)
def _parse_program_cached(source: str) -> Program:
    return parse_program(source)


def program_cache_stats(*, reset: bool = False) -> dict[str, float | int]:
    info = _parse_program_cached.cache_info()
    total = info.hits + info.misses
    stats: dict[str, float | int] = {
        "hits": info.hits,
        "misses": info.misses,
        "size": info.currsize,
        "max_size": _PROGRAM_CACHE_MAX,
        "hit_rate": float(info.hits / total) if total else 0.0,
    }
    if reset:
        _parse_program_cached.cache_clear()
    return stats


@dataclass(frozen=True)
class ExecutionPolicy:
    """Evaluation settings shared by both stacks of one call.

    - `dtype`: signed integer element type of the stacks (`int8` ... `int64`).
    - `scope`: `evaluate` runs `<...>` bodies on the current stack; `switch`
      flips the active stack for the body and restores it afterwards.
    - `max_loop_iterations`: total loop-body executions allowed per call, or
      `None` for no cap.
    """

    dtype: object = _DEFAULT_DTYPE
    scope: str = _DEFAULT_SCOPE
    max_loop_iterations: int | None = _DEFAULT_MAX_LOOP_ITERATIONS or None

    def __post_init__(self) -> None:
        if self.scope not in _SCOPE_POLICIES:
            raise ValueError(f"scope must be one of {', '.join(_SCOPE_POLICIES)}, got {self.scope!r}")
        if self.max_loop_iterations is not None and self.max_loop_iterations < 1:
            raise ValueError("max_loop_iterations must be positive or None")
        element_type(self.dtype)

    @property
    def element_type(self) -> ElementType:
        return element_type(self.dtype)


def _resolve_policy(policy: ExecutionPolicy | None, dtype: object | None) -> ExecutionPolicy:
    resolved = ExecutionPolicy() if policy is None else policy
    if dtype is not None:
        resolved = replace(resolved, dtype=dtype)
    return resolved


class _Machine:
    def __init__(self, left: Stack, right: Stack, policy: ExecutionPolicy) -> None:
        self.stacks = (left, right)
        self.active = 0
        self.switch_scopes = policy.scope == "switch"
        self.loop_limit = policy.max_loop_iterations
        self.loop_iterations = 0

    @property
    def stack(self) -> Stack:
        return self.stacks[self.active]

    def run(self, nodes: tuple[Node, ...]) -> int:
        total = 0
        for node in nodes:
            total += self.step(node)
        return total

    def step(self, node: Node) -> int:
        if isinstance(node, Inc):
            return 1

        if isinstance(node, Height):
            return self.stack.height

        if isinstance(node, PopAdd):
            return self.stack.pop()

        if isinstance(node, Toggle):
            self.active ^= 1
            return 0

        if isinstance(node, Push):
            value = self.run(node.body)
            return self.stack.push(value, start=node.start, end=node.end)

        if isinstance(node, Negate):
            return -self.run(node.body)

        if isinstance(node, Loop):
            return self._loop(node)

        if isinstance(node, Scoped):
            if self.switch_scopes:
                saved = self.active
                self.active ^= 1
                self.run(node.body)
                self.active = saved
            else:
                self.run(node.body)
            return 0

        raise TypeError(f"Unsupported operation node {type(node).__name__}")

    def _loop(self, node: Loop) -> int:
        total = 0
        # An empty stack and a zero top both end the loop.
        while self.stack.peek():
            if self.loop_limit is not None:
                self.loop_iterations += 1
                if self.loop_iterations > self.loop_limit:
                    raise IterationLimitError(self.loop_limit, start=node.start, end=node.end)
            total += self.run(node.body)
        return total


def execute(
    program: Program,
    left: MutableSequence[int],
    right: MutableSequence[int],
    *,
    policy: ExecutionPolicy | None = None,
) -> int:
    """Run `program` against two caller-owned stacks, mutating them in place.

    Returns the program's top-level value. Mutations made before a failure are
    not rolled back.
    """
    if left is right:
        raise ValueError("left and right must be distinct stacks")
    policy = ExecutionPolicy() if policy is None else policy
    kind = policy.element_type
    validate_items(left, kind, where="left")
    validate_items(right, kind, where="right")

    machine = _Machine(Stack(left, kind), Stack(right, kind), policy)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            f"running program: nodes={node_count(program.body)} dtype={kind.name} "
            f"scope={policy.scope} max_loop_iterations={policy.max_loop_iterations}"
        )
    try:
        value = machine.run(program.body)
    except ArithmeticOverflowError as err:
        logger.debug(f"push overflow at span [{err.start}, {err.end}): {err}")
        raise
    logger.debug(f"program finished: value={value} left_height={len(left)} right_height={len(right)}")
    return value


def _as_program(source: object) -> Program:
    if isinstance(source, str):
        return _parse_program_cached(source)
    if isinstance(source, Program):
        return source
    if isinstance(source, CompiledProgram):
        return source.program
    raise TypeError(f"expected source text or a Program, got {type(source).__name__}")


def _invoke(
    program: Program,
    left: MutableSequence[int] | None,
    right: MutableSequence[int] | None,
    policy: ExecutionPolicy,
) -> list[int] | None:
    if left is None:
        if right is not None:
            raise TypeError("a right stack requires a left stack")
        fresh_left: list[int] = []
        execute(program, fresh_left, [], policy=policy)
        return fresh_left
    execute(program, left, [] if right is None else right, policy=policy)
    return None


@dataclass(frozen=True)
class CompiledProgram:
    """A parsed program bound to an execution policy, callable on stacks."""

    program: Program
    policy: ExecutionPolicy
    source: str | None = None

    def __call__(
        self,
        left: MutableSequence[int] | None = None,
        right: MutableSequence[int] | None = None,
    ) -> list[int] | None:
        return _invoke(self.program, left, right, self.policy)

    @property
    def node_count(self) -> int:
        return node_count(self.program.body)


def compile_program(
    source: str | Program,
    *,
    policy: ExecutionPolicy | None = None,
    dtype: object | None = None,
) -> CompiledProgram:
    program = _as_program(source)
    text = source if isinstance(source, str) else None
    return CompiledProgram(program=program, policy=_resolve_policy(policy, dtype), source=text)


class StackEnvironment:
    """Persistent pair of stacks for stateful evaluate() calls."""

    def __init__(
        self,
        left: MutableSequence[int] | None = None,
        right: MutableSequence[int] | None = None,
        *,
        policy: ExecutionPolicy | None = None,
        dtype: object | None = None,
    ) -> None:
        if left is not None and left is right:
            raise ValueError("left and right must be distinct stacks")
        self.policy = _resolve_policy(policy, dtype)
        self.left: MutableSequence[int] = [] if left is None else left
        self.right: MutableSequence[int] = [] if right is None else right
        kind = self.policy.element_type
        validate_items(self.left, kind, where="left")
        validate_items(self.right, kind, where="right")

    def run(self, source: str | Program | CompiledProgram) -> int:
        return execute(_as_program(source), self.left, self.right, policy=self.policy)

    def __repr__(self) -> str:
        return f"StackEnvironment(left={list(self.left)!r}, right={list(self.right)!r})"


@dataclass
class StatefulEvaluate:
    """Callable wrapper that evaluates source against persistent stacks."""

    env: StackEnvironment

    def __call__(self, source: str | Program | CompiledProgram) -> list[int]:
        self.env.run(source)
        return [int(value) for value in self.env.left]


@overload
def evaluate(source: str | Program | CompiledProgram) -> list[int]:
    ...


@overload
def evaluate(source: str | Program | CompiledProgram, left: MutableSequence[int]) -> None:
    ...


@overload
def evaluate(source: str | Program | CompiledProgram, left: MutableSequence[int], right: MutableSequence[int]) -> None:
    ...


@overload
def evaluate(source: str | Program | CompiledProgram, left: StackEnvironment) -> tuple[list[int], StackEnvironment]:
    ...


@overload
def evaluate(source: StackEnvironment) -> StatefulEvaluate:
    ...


def evaluate(
    source_or_env,
    left=None,
    right=None,
    *,
    policy: ExecutionPolicy | None = None,
    dtype: object | None = None,
):
    """Parse and run Brain-Flak on zero, one or two caller stacks.

    With no stacks the final Left stack is returned; with caller stacks they
    are mutated in place and nothing is returned. A `StackEnvironment` keeps
    stacks alive across calls.
    """
    if isinstance(source_or_env, StackEnvironment):
        if left is not None or right is not None or policy is not None or dtype is not None:
            raise TypeError("evaluate(env) form takes exactly one argument")
        return StatefulEvaluate(source_or_env)

    if isinstance(left, StackEnvironment):
        if right is not None or policy is not None or dtype is not None:
            raise TypeError("evaluate(source, env) takes its policy from the environment")
        left.run(_as_program(source_or_env))
        return [int(value) for value in left.left], left

    if isinstance(source_or_env, CompiledProgram) and policy is None:
        # A compiled program keeps its own policy unless one is given.
        return _invoke(source_or_env.program, left, right, _resolve_policy(source_or_env.policy, dtype))

    program = _as_program(source_or_env)
    return _invoke(program, left, right, _resolve_policy(policy, dtype))


def evaluate_with_errors(
    source,
    left=None,
    right=None,
    *,
    policy: ExecutionPolicy | None = None,
    dtype: object | None = None,
):
    """Evaluate with parse failures and stray runtime failures as structured errors."""
    try:
        return evaluate(source, left, right, policy=policy, dtype=dtype)
    except ParseError as err:
        raise BrainFlakParseError.from_parse_error(err) from err
    except BrainFlakError:
        raise
    except Exception as err:
        raise classify_runtime_exception(err) from err
