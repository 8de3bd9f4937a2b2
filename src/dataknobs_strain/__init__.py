"""DataKnobs Strain Package

Declarative coercion and validation of nested data against schemes.

A scheme mirrors the structure of the data it filters: each field names a
filter or holds a nested scheme. Straining coerces values, checks them,
optionally adds or removes fields, and reports failures in a result tree
shaped like the scheme.

Example:
    ```python
    import dataknobs_strain as strain

    user = {"name": 123, "age": "7", "extra": "x"}
    strain.sanitize(user, {"name": "string", "age": "integer"})
    # {'name': '123', 'age': 7}

    outcome = strain.validate({"age": "x"}, {"age": "integer"})
    outcome.valid
    # False
    outcome.error_paths()
    # {'age': "Cannot coerce str to int: invalid literal for int() with base 10: 'x'"}
    ```

The module-level functions use a process-wide strainer with the built-in
filters registered. Create your own ``Strainer`` (or ``Strainer.from_config``)
for an isolated registry.
"""

from typing import Any

from .config import StrainConfig, StrainSettings, build_strainer, load_config
from .engine import Strainer
from .exceptions import (
    ConfigurationError,
    RegistryFrozenError,
    SchemeError,
    SchemeNotFoundError,
    StrainError,
)
from .filters import register_builtin_filters
from .modes import ForceMode
from .registry import SchemeRegistry
from .result import Outcome, ResultTree, Verdict, VerdictKind, reduce_to_boolean
from .scheme import Chain, ChainEntry, ObjectSchema, Reference, Scheme, Unit, as_scheme
from .slots import ItemSlot, Slot, ValueSlot

__version__ = "0.1.0"

default_strainer = Strainer(SchemeRegistry("default"))
register_builtin_filters(default_strainer)


def run(data: Any, scheme: Any, force: ForceMode | str | int | None = None) -> Outcome:
    """Strain with the default strainer and return the full Outcome."""
    return default_strainer.run(data, scheme, force)


def validate(data: Any, scheme: Any) -> Outcome:
    """Validate with the default strainer, leaving the structure unchanged."""
    return default_strainer.validate(data, scheme)


def complete(data: Any, scheme: Any) -> Any:
    """Add missing scheme fields using the default strainer."""
    return default_strainer.complete(data, scheme)


def truncate(data: Any, scheme: Any) -> Any:
    """Remove undeclared fields using the default strainer."""
    return default_strainer.truncate(data, scheme)


def sanitize(data: Any, scheme: Any) -> Any:
    """Add missing and remove undeclared fields using the default strainer."""
    return default_strainer.sanitize(data, scheme)


def register(name: str, scheme: Any) -> bool:
    """Register a scheme in the default registry."""
    return default_strainer.register(name, scheme)


def unregister(name: str) -> bool:
    """Remove a scheme from the default registry."""
    return default_strainer.unregister(name)


def lookup(name: str) -> Scheme:
    """Get a scheme from the default registry."""
    return default_strainer.lookup(name)


__all__ = [
    "__version__",
    # Engine
    "Strainer",
    "ForceMode",
    "default_strainer",
    "run",
    "validate",
    "complete",
    "truncate",
    "sanitize",
    "register",
    "unregister",
    "lookup",
    # Schemes
    "Scheme",
    "Reference",
    "Unit",
    "ObjectSchema",
    "Chain",
    "ChainEntry",
    "as_scheme",
    "SchemeRegistry",
    # Results
    "Verdict",
    "VerdictKind",
    "ResultTree",
    "Outcome",
    "reduce_to_boolean",
    # Slots
    "Slot",
    "ValueSlot",
    "ItemSlot",
    # Configuration
    "StrainSettings",
    "StrainConfig",
    "load_config",
    "build_strainer",
    "register_builtin_filters",
    # Exceptions
    "StrainError",
    "SchemeNotFoundError",
    "SchemeError",
    "RegistryFrozenError",
    "ConfigurationError",
]
