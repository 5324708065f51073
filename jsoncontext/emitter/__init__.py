"""Code emission for inferred type graphs."""

from .constants import DEFAULT_CONTAINER, DEFAULT_NAMESPACE, MODULE_NAMES, RESERVED_NAMES
from .renderer import CodeEmitter, EmissionError, EmittedCode, FieldSpec, ModelSpec, emit

__all__ = [
    "CodeEmitter",
    "DEFAULT_CONTAINER",
    "DEFAULT_NAMESPACE",
    "EmissionError",
    "EmittedCode",
    "FieldSpec",
    "MODULE_NAMES",
    "ModelSpec",
    "RESERVED_NAMES",
    "emit",
]
