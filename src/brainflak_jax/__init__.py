"""brainflak-jax public API."""

from .ast import Height, Inc, Loop, Negate, PopAdd, Program, Push, Scoped, Toggle, render
from .parser import ParseError, UnterminatedGroupError, parse, parse_program, parse_tokens
from .errors import (
    ArithmeticOverflowError,
    BrainFlakError,
    BrainFlakParseError,
    BrainFlakRuntimeError,
    ElementTypeError,
    IterationLimitError,
)

try:
    from .evaluator import (
        CompiledProgram,
        ExecutionPolicy,
        StackEnvironment,
        StatefulEvaluate,
        compile_program,
        evaluate,
        evaluate_with_errors,
        execute,
        program_cache_stats,
    )
except ModuleNotFoundError as exc:
    if exc.name and exc.name.startswith("jax"):
        _jax_import_error = exc

        def evaluate(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for evaluate(). Install runtime deps first."
            ) from _jax_import_error

        def execute(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for execute(). Install runtime deps first."
            ) from _jax_import_error

        def compile_program(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for compile_program(). Install runtime deps first."
            ) from _jax_import_error

        def evaluate_with_errors(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for evaluate_with_errors(). Install runtime deps first."
            ) from _jax_import_error

        def program_cache_stats(*_args, **_kwargs):
            raise ModuleNotFoundError(
                "jax is required for program_cache_stats(). Install runtime deps first."
            ) from _jax_import_error

        class ExecutionPolicy:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for ExecutionPolicy(). Install runtime deps first."
                ) from _jax_import_error

        class StackEnvironment:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for StackEnvironment(). Install runtime deps first."
                ) from _jax_import_error

        class StatefulEvaluate:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for StatefulEvaluate(). Install runtime deps first."
                ) from _jax_import_error

        class CompiledProgram:  # pragma: no cover - import-time fallback
            def __init__(self, *_args, **_kwargs) -> None:
                raise ModuleNotFoundError(
                    "jax is required for CompiledProgram(). Install runtime deps first."
                ) from _jax_import_error

    else:
        raise

__all__ = [
    "parse",
    "parse_program",
    "parse_tokens",
    "render",
    "ParseError",
    "UnterminatedGroupError",
    "Program",
    "Inc",
    "Height",
    "PopAdd",
    "Toggle",
    "Push",
    "Negate",
    "Loop",
    "Scoped",
    "evaluate",
    "execute",
    "compile_program",
    "evaluate_with_errors",
    "program_cache_stats",
    "ExecutionPolicy",
    "StackEnvironment",
    "StatefulEvaluate",
    "CompiledProgram",
    "BrainFlakError",
    "BrainFlakParseError",
    "BrainFlakRuntimeError",
    "ArithmeticOverflowError",
    "IterationLimitError",
    "ElementTypeError",
]
