"""Constants for rendering shapes as Python annotations."""

from __future__ import annotations

import builtins

from ..shapes import BOOLEAN, INTEGER, NUMBER, STRING

ANY = "Any"

PRIMITIVE_ANNOTATIONS = {
    STRING: "str",
    INTEGER: "int",
    NUMBER: "float",
    BOOLEAN: "bool",
}

DEFAULT_NAMESPACE = "JsonContext"
DEFAULT_CONTAINER = "JsonDataContext"

MODULE_TEMPLATE = "module.py.j2"
MODEL_TEMPLATE = "model.py.j2"

# Names bound by the module template; generated classes must not shadow them.
MODULE_NAMES = frozenset(
    {
        "Any",
        "BaseModel",
        "ConfigDict",
        "Dict",
        "Field",
        "List",
        "Optional",
        "Path",
        "json",
        "_JSON_WHITESPACE",
        "_collect_objects",
        "_read_records",
    }
)

# Annotations and the record reader resolve these through the module globals.
BUILTIN_NAMES = frozenset(dir(builtins))

RESERVED_NAMES = MODULE_NAMES | BUILTIN_NAMES
