"""Naming helpers for constructors shown in diagnostics."""

import functools
import inspect
import os
from typing import Any, Optional, Tuple


def _unwrap(func: Any) -> Any:
    while isinstance(func, functools.partial):
        func = func.func
    try:
        return inspect.unwrap(func)
    except ValueError:
        return func


def func_name(func: Any) -> str:
    """Return the dotted name of a callable, e.g. ``pkg.mod.new_server``."""
    target = _unwrap(func)
    qualname = getattr(target, "__qualname__", None) or getattr(target, "__name__", None)
    if qualname is None:
        qualname = type(target).__qualname__
    module = getattr(target, "__module__", None)
    if module and module != "builtins":
        return f"{module}.{qualname}"
    return qualname


def func_location(func: Any) -> Optional[Tuple[str, int]]:
    """Return ``(file basename, line)`` of a callable's definition if known."""
    target = _unwrap(func)
    code = getattr(target, "__code__", None)
    if code is not None:
        return os.path.basename(code.co_filename), code.co_firstlineno
    
    # Classes and other callables without a code object
    try:
        filename = inspect.getsourcefile(target)
        _, line = inspect.getsourcelines(target)
    except (TypeError, OSError):
        return None
    if filename is None:
        return None
    return os.path.basename(filename), line


def func_name_and_location(func: Any) -> str:
    """Describe a callable as ``name (file.py:line)``."""
    name = func_name(func)
    location = func_location(func)
    if location is None:
        return name
    return f"{name} ({location[0]}:{location[1]})"


def type_name(tp: Any) -> str:
    """Return a stable, readable name for a type descriptor."""
    if isinstance(tp, type) and not getattr(tp, "__args__", None):
        module = tp.__module__
        if module == "builtins":
            return tp.__qualname__
        return f"{module}.{tp.__qualname__}"
    return repr(tp).replace("typing.", "")
