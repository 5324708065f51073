"""Schema inference and typed data-context generation for JSON sources."""

from .emitter import CodeEmitter, EmissionError, EmittedCode, emit
from .loader import compile_module
from .models import GeneratedClass, InputKind, InputSource, SourceFailure, TypeGraph
from .pipeline import GenerationResult, JsonContextDriver, format_failure_report, generate, infer
from .sampler import SourceReadError

__all__ = [
    "CodeEmitter",
    "EmissionError",
    "EmittedCode",
    "GeneratedClass",
    "GenerationResult",
    "InputKind",
    "InputSource",
    "JsonContextDriver",
    "SourceFailure",
    "SourceReadError",
    "TypeGraph",
    "compile_module",
    "emit",
    "format_failure_report",
    "generate",
    "infer",
]
