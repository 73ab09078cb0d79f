"""Dotted-path imports for CLI options."""

import importlib
from typing import Any

__all__ = ("import_string",)


def import_string(dotted_path: str) -> "Any":
    """Dotted Path Import.

    Import a dotted module path and return the attribute designated by the
    trailing names. ``module:attr`` is accepted as well as ``module.attr``.

    Args:
        dotted_path: The path of the object to import.

    Raises:
        ImportError: Could not import the module or resolve the attribute.

    Returns:
        object: The imported object.
    """
    module_path, sep, attr_path = dotted_path.partition(":")
    if sep:
        attrs = attr_path.split(".") if attr_path else []
        module = importlib.import_module(module_path)
    else:
        parts = dotted_path.split(".")
        for i in range(len(parts), 0, -1):
            try:
                module = importlib.import_module(".".join(parts[:i]))
                break
            except ModuleNotFoundError:
                continue
        else:
            msg = f"{dotted_path} doesn't look like a module path"
            raise ImportError(msg)
        attrs = parts[i:]

    obj = module
    for attr in attrs:
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            msg = f"Module '{module.__name__}' has no attribute '{attr}' in '{dotted_path}'"
            raise ImportError(msg) from e
    return obj
