"""Renders a type graph as an importable Python module."""

from __future__ import annotations

import keyword
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from jinja2 import Environment, FileSystemLoader

from ..models import GeneratedClass, TypeGraph
from ..naming import dedupe_names, field_identifier, pascal_case
from ..shapes import (
    NULL,
    ArrayShape,
    ObjectShape,
    OptionalShape,
    Primitive,
    TypeShape,
    Unknown,
    Untyped,
)
from .constants import (
    ANY,
    DEFAULT_CONTAINER,
    DEFAULT_NAMESPACE,
    MODEL_TEMPLATE,
    MODULE_NAMES,
    MODULE_TEMPLATE,
    PRIMITIVE_ANNOTATIONS,
    RESERVED_NAMES,
)


_ANNOTATION_NAMES = frozenset(PRIMITIVE_ANNOTATIONS.values()) | {ANY}


class EmissionError(RuntimeError):
    """Raised when a finalized type graph cannot be rendered."""


@dataclass(frozen=True)
class FieldSpec:
    """One attribute of a generated model."""

    name: str
    alias: str
    annotation: str
    optional: bool

    @property
    def declaration(self) -> str:
        if self.name == self.alias:
            default = " = None" if self.optional else ""
            return f"{self.name}: {self.annotation}{default}"
        if self.optional:
            return f"{self.name}: {self.annotation} = Field(default=None, alias={self.alias!r})"
        return f"{self.name}: {self.annotation} = Field(alias={self.alias!r})"


@dataclass
class ModelSpec:
    name: str
    fields: List[FieldSpec] = field(default_factory=list)
    source: Optional[str] = None


@dataclass(frozen=True)
class _AccessorView:
    name: str
    class_name: str
    path_literal: str


@dataclass
class EmittedCode:
    """Rendered module text plus a manifest of every generated model."""

    source: str
    manifest: Dict[str, List[FieldSpec]]
    classes: List[GeneratedClass]


class CodeEmitter:
    """Turns a ``TypeGraph`` into a pydantic-based data context module."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def emit(
        self,
        graph: TypeGraph,
        namespace: str = DEFAULT_NAMESPACE,
        container: str = DEFAULT_CONTAINER,
    ) -> EmittedCode:
        _check_namespace(namespace)
        _check_identifier(container, "container name")
        if container in RESERVED_NAMES:
            raise EmissionError(f"Container name {container!r} shadows a module-level or builtin name")

        top_level = graph.class_names
        if len(set(top_level)) != len(top_level):
            raise EmissionError("Type graph contains duplicate class names")
        if container in top_level:
            raise EmissionError(f"Class name {container!r} collides with the container")
        for name in top_level:
            _check_identifier(name, "class name")
            if name in RESERVED_NAMES:
                raise EmissionError(f"Class name {name!r} shadows a module-level or builtin name")

        used: Set[str] = set(top_level) | {container} | MODULE_NAMES
        manifest: Dict[str, List[FieldSpec]] = {}
        definitions: List[str] = []
        classes: List[GeneratedClass] = []

        for item in graph.classes:
            shape = item.shape if item.shape is not None else ObjectShape({})
            if not isinstance(shape, ObjectShape):
                raise EmissionError(f"Top-level shape for {item.class_name} must be an object")
            models: List[ModelSpec] = []
            self._collect_models(item.class_name, shape, used, models)
            models[-1].source = repr(item.data_file_path)
            rendered = [self._render_model(model) for model in models]
            for model in models:
                manifest[model.name] = list(model.fields)
            definition = "\n\n\n".join(rendered)
            definitions.append(definition)
            classes.append(replace(item, definition=definition))

        accessors = [
            _AccessorView(
                name=accessor.name,
                class_name=accessor.class_name,
                path_literal=repr(accessor.data_file_path),
            )
            for accessor in graph.accessors
        ]
        template = self._env.get_template(MODULE_TEMPLATE)
        source = template.render(
            namespace=namespace,
            container=container,
            exports=[container, *top_level],
            accessors=accessors,
            definitions=definitions,
        )
        return EmittedCode(source=source.rstrip("\n") + "\n", manifest=manifest, classes=classes)

    def _render_model(self, model: ModelSpec) -> str:
        template = self._env.get_template(MODEL_TEMPLATE)
        return template.render(model=model).rstrip("\n")

    def _collect_models(
        self,
        name: str,
        shape: ObjectShape,
        used: Set[str],
        models: List[ModelSpec],
    ) -> None:
        """Append the model for ``shape`` after every model it depends on."""
        keys = list(shape.fields)
        annotations = [
            self._annotation(shape.fields[key], name, key, used, models) for key in keys
        ]
        # Defaulted fields bind names in the class body; keep them off annotation names.
        referenced = used | _ANNOTATION_NAMES
        attribute_names = dedupe_names(
            _shield(field_identifier(key), referenced) for key in keys
        )
        fields: List[FieldSpec] = []
        for key, attribute, (annotation, optional) in zip(keys, attribute_names, annotations):
            fields.append(
                FieldSpec(name=attribute, alias=key, annotation=annotation, optional=optional)
            )
        models.append(ModelSpec(name=name, fields=fields))

    def _annotation(
        self,
        shape: TypeShape,
        owner: str,
        key: str,
        used: Set[str],
        models: List[ModelSpec],
    ) -> Tuple[str, bool]:
        if isinstance(shape, OptionalShape):
            inner, _ = self._annotation(shape.wrapped, owner, key, used, models)
            if inner == ANY:
                return ANY, True
            return f"Optional[{inner}]", True
        if isinstance(shape, (Unknown, Untyped)):
            return ANY, True
        if isinstance(shape, Primitive):
            if shape.kind == NULL:
                return ANY, True
            return PRIMITIVE_ANNOTATIONS[shape.kind], False
        if isinstance(shape, ArrayShape):
            inner, _ = self._annotation(shape.element, owner, key, used, models)
            return f"List[{inner}]", False
        if isinstance(shape, ObjectShape):
            nested = _reserve(owner + pascal_case(key), used)
            self._collect_models(nested, shape, used, models)
            return nested, False
        raise EmissionError(f"Unsupported shape for field {key!r}: {shape!r}")


def emit(
    graph: TypeGraph,
    namespace: str = DEFAULT_NAMESPACE,
    container: str = DEFAULT_CONTAINER,
) -> EmittedCode:
    """Render ``graph`` with the packaged templates."""
    return CodeEmitter().emit(graph, namespace=namespace, container=container)


def _shield(name: str, referenced: Set[str]) -> str:
    return f"{name}_" if name in referenced else name


def _reserve(candidate: str, used: Set[str]) -> str:
    name = candidate
    index = 1
    while name in used or name in RESERVED_NAMES:
        name = f"{candidate}_{index}"
        index += 1
    used.add(name)
    return name


def _check_identifier(value: str, label: str) -> None:
    if not value.isidentifier() or keyword.iskeyword(value):
        raise EmissionError(f"Invalid {label}: {value!r}")


def _check_namespace(namespace: str) -> None:
    parts: Sequence[str] = namespace.split(".")
    for part in parts:
        _check_identifier(part, "namespace")


__all__ = ["CodeEmitter", "EmissionError", "EmittedCode", "FieldSpec", "ModelSpec", "emit"]
