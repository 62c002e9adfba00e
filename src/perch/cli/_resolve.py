"""Endpoint import resolution — ``"module:attribute"`` strings to endpoint types."""

import importlib
from typing import Any


def resolve_endpoint(import_string: str) -> Any:
    """Resolve an import string to an endpoint type or descriptor.

    Accepts ``"module:attribute"``. When the attribute is omitted it
    defaults to ``"Endpoint"`` (``"myapp"`` resolves to ``myapp.Endpoint``).

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "Endpoint"

    module = importlib.import_module(module_path)
    return getattr(module, attr_name)
