"""Default compile capability: turn emitted source into a live module."""

from __future__ import annotations

import sys
import types

from .emitter import EmissionError
from .logging import get_logger

logger = get_logger("loader")


def compile_module(source: str, module_name: str) -> types.ModuleType:
    """Execute ``source`` as a fresh module registered under ``module_name``.

    This is the default compile capability a ``JsonContextDriver`` receives.
    The emitted text only exists in memory, so it is compiled and run with
    ``exec`` rather than imported from disk; hosts that prefer writing a file
    and importing it inject their own callable instead.

    Registration in ``sys.modules`` happens before execution so pydantic can
    resolve the module while building the generated models. A previously
    registered module of the same name is replaced.
    """
    try:
        code = compile(source, f"<jsoncontext:{module_name}>", "exec")
    except SyntaxError as exc:
        raise EmissionError(f"Emitted source for {module_name} does not compile: {exc}") from exc

    module = types.ModuleType(module_name)
    previous = sys.modules.get(module_name)
    sys.modules[module_name] = module
    try:
        exec(code, module.__dict__)
    except BaseException:
        if previous is not None:
            sys.modules[module_name] = previous
        else:
            sys.modules.pop(module_name, None)
        raise
    logger.debug("Loaded generated module %s", module_name)
    return module


__all__ = ["compile_module"]
