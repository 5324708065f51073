"""Structural type shapes inferred from sampled JSON values.

Shapes form a closed set of immutable values. ``merge`` combines two shapes
observed for the same position and is commutative and associative, so the
order in which samples are folded never changes the result. Incompatible
samples degrade to ``UNTYPED`` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from functools import reduce
from typing import Any, Dict, Iterable, Mapping, Union

STRING = "string"
INTEGER = "integer"
NUMBER = "number"
BOOLEAN = "boolean"
NULL = "null"

PRIMITIVE_KINDS = (STRING, INTEGER, NUMBER, BOOLEAN, NULL)


@dataclass(frozen=True)
class Primitive:
    kind: str

    def __post_init__(self) -> None:
        if self.kind not in PRIMITIVE_KINDS:
            raise ValueError(f"Unknown primitive kind: {self.kind!r}")


@dataclass(frozen=True)
class ArrayShape:
    element: "TypeShape"


@dataclass(frozen=True)
class ObjectShape:
    """Nested field mapping; iteration follows first-seen order, equality does not."""

    fields: Dict[str, "TypeShape"]

    def __hash__(self) -> int:
        return hash(frozenset(self.fields.items()))


@dataclass(frozen=True)
class OptionalShape:
    wrapped: "TypeShape"


@dataclass(frozen=True)
class Unknown:
    """No samples observed."""


@dataclass(frozen=True)
class Untyped:
    """Fallback for samples whose kinds cannot be reconciled."""


UNKNOWN = Unknown()
UNTYPED = Untyped()

TypeShape = Union[Primitive, ArrayShape, ObjectShape, OptionalShape, Unknown, Untyped]

_NULL = Primitive(NULL)


def shape_of(value: Any) -> TypeShape:
    """Return the shape of a single decoded JSON value."""
    if value is None:
        return _NULL
    if isinstance(value, bool):
        return Primitive(BOOLEAN)
    if isinstance(value, int):
        return Primitive(INTEGER)
    if isinstance(value, (float, Decimal)):
        return Primitive(NUMBER)
    if isinstance(value, str):
        return Primitive(STRING)
    if isinstance(value, Mapping):
        return ObjectShape({str(key): shape_of(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return ArrayShape(merge_all(shape_of(item) for item in value))
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def make_optional(shape: TypeShape) -> TypeShape:
    if isinstance(shape, (OptionalShape, Unknown, Untyped)) or shape == _NULL:
        return shape
    return OptionalShape(shape)


def unwrap(shape: TypeShape) -> TypeShape:
    return shape.wrapped if isinstance(shape, OptionalShape) else shape


def merge(left: TypeShape, right: TypeShape) -> TypeShape:
    """Combine two shapes observed at the same position."""
    if isinstance(left, Unknown):
        return right
    if isinstance(right, Unknown):
        return left
    if isinstance(left, OptionalShape) or isinstance(right, OptionalShape):
        return make_optional(merge(unwrap(left), unwrap(right)))
    if left == _NULL:
        return make_optional(right)
    if right == _NULL:
        return make_optional(left)
    if isinstance(left, Primitive) and isinstance(right, Primitive):
        return _merge_primitives(left, right)
    if isinstance(left, ArrayShape) and isinstance(right, ArrayShape):
        return ArrayShape(merge(left.element, right.element))
    if isinstance(left, ObjectShape) and isinstance(right, ObjectShape):
        return _merge_objects(left, right)
    return UNTYPED


def merge_all(shapes: Iterable[TypeShape]) -> TypeShape:
    return reduce(merge, shapes, UNKNOWN)


def infer_record_shape(records: Iterable[Mapping[str, Any]]) -> ObjectShape:
    """Fold every sampled record into one object shape.

    Fields missing from some records come back wrapped in ``OptionalShape``.
    No records at all yields an empty object shape.
    """
    shape = merge_all(shape_of(record) for record in records)
    if isinstance(shape, Unknown):
        return ObjectShape({})
    if not isinstance(shape, ObjectShape):
        raise TypeError("Sampled records must be JSON objects")
    return shape


def describe(shape: TypeShape) -> str:
    """Compact human-readable rendering used in logs and reports."""
    if isinstance(shape, Primitive):
        return shape.kind
    if isinstance(shape, ArrayShape):
        return f"array<{describe(shape.element)}>"
    if isinstance(shape, OptionalShape):
        return f"{describe(shape.wrapped)}?"
    if isinstance(shape, ObjectShape):
        inner = ", ".join(f"{name}: {describe(item)}" for name, item in shape.fields.items())
        return "{" + inner + "}"
    if isinstance(shape, Unknown):
        return "unknown"
    return "any"


def _merge_primitives(left: Primitive, right: Primitive) -> TypeShape:
    if left.kind == right.kind:
        return left
    if {left.kind, right.kind} == {INTEGER, NUMBER}:
        return Primitive(NUMBER)
    return UNTYPED


def _merge_objects(left: ObjectShape, right: ObjectShape) -> ObjectShape:
    merged: Dict[str, TypeShape] = {}
    for name, shape in left.fields.items():
        if name in right.fields:
            merged[name] = merge(shape, right.fields[name])
        else:
            merged[name] = make_optional(shape)
    for name, shape in right.fields.items():
        if name not in left.fields:
            merged[name] = make_optional(shape)
    return ObjectShape(merged)


__all__ = [
    "ArrayShape",
    "BOOLEAN",
    "INTEGER",
    "NULL",
    "NUMBER",
    "ObjectShape",
    "OptionalShape",
    "Primitive",
    "STRING",
    "TypeShape",
    "UNKNOWN",
    "UNTYPED",
    "Unknown",
    "Untyped",
    "describe",
    "infer_record_shape",
    "make_optional",
    "merge",
    "merge_all",
    "shape_of",
    "unwrap",
]
