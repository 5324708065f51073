"""Assembly of per-file candidates into a uniquely named type graph."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List

from .models import Accessor, GeneratedClass, TypeGraph
from .naming import dedupe_names, to_identifier


def accessor_name(class_name: str) -> str:
    """Pluralised property name; keywords such as ``as`` gain a trailing underscore."""
    return to_identifier(f"{class_name}s")


def build_type_graph(
    candidates: Iterable[GeneratedClass], reserved: Iterable[str] = ()
) -> TypeGraph:
    """Drop failed candidates, disambiguate duplicate names and attach accessors.

    Candidates are ordered by their input declaration position before names
    are resolved, so duplicate suffixes do not depend on the order in which
    per-file work finished. ``reserved`` names (such as the container class)
    are treated as already taken.
    """
    ordered = sorted(enumerate(candidates), key=lambda pair: (pair[1].source_index, pair[0]))
    succeeded = [item for _, item in ordered if item.success]
    failures = [item for _, item in ordered if not item.success]

    names = dedupe_names((item.class_name for item in succeeded), reserved=reserved)
    classes: List[GeneratedClass] = []
    for item, name in zip(succeeded, names):
        classes.append(item if item.class_name == name else replace(item, class_name=name))

    accessor_names = dedupe_names(accessor_name(item.class_name) for item in classes)
    accessors = [
        Accessor(
            name=name,
            class_name=item.class_name,
            data_file_path=item.data_file_path,
        )
        for item, name in zip(classes, accessor_names)
    ]
    return TypeGraph(classes=classes, accessors=accessors, failures=failures)


__all__ = ["accessor_name", "build_type_graph"]
