"""Built-in filter units.

Every filter follows the unit contract ``(slot, options) -> verdict``:

- return ``None`` to let the next chain entry run,
- return ``False`` to stop the chain without an error,
- return anything else (usually a message) to stop with an error.

Coercion filters rewrite ``slot.value``; check filters only read it.

Example:
    ```python
    strainer = Strainer()
    register_builtin_filters(strainer)
    strainer.validate({"age": "42"}, {"age": ["null", "integer", {"range": (0, 150)}]})
    ```
"""

from __future__ import annotations

import copy
import logging
import math
import re
from collections.abc import Callable, Mapping
from datetime import datetime
from numbers import Number
from typing import TYPE_CHECKING, Any

from .coercer import Coercer
from .exceptions import SchemeError
from .result import Verdict
from .slots import Slot

if TYPE_CHECKING:
    from .engine import Strainer

logger = logging.getLogger(__name__)

_coercer = Coercer()


def _bounds(options: Any, *, kind: str) -> dict[str, Any]:
    """Read ``(min, max)``, ``{"min": .., "max": ..}`` or a bare maximum.

    Raises:
        SchemeError: If the options have none of these shapes or a bound is
            not a number
    """
    if isinstance(options, Mapping):
        limits = dict(options)
    elif isinstance(options, (list, tuple)) and len(options) <= 2:
        low = options[0] if len(options) > 0 else None
        high = options[1] if len(options) > 1 else None
        limits = {"min": low, "max": high}
    elif options is None:
        limits = {}
    elif isinstance(options, Number) and not isinstance(options, bool):
        limits = {"max": options}
    else:
        limits = None

    if limits is None or any(
        limits.get(key) is not None and (not isinstance(limits[key], Number) or isinstance(limits[key], bool))
        for key in ("min", "max")
    ):
        raise SchemeError(
            f"Invalid {kind} options: {options!r}",
            context={"filter": kind, "options": options},
        )
    return limits


# Coercions


def _coercion(target_type: type) -> Callable[[Slot, Any], Any]:
    def coerce(slot: Slot, options: Any = None) -> Any:
        result = _coercer.coerce(slot.value, target_type)
        if not result:
            return result.error
        slot.value = result.value
        return None

    coerce.__name__ = target_type.__name__
    return coerce


def string(slot: Slot, options: Any = None) -> Any:
    """Coerce to ``str``; an int option is a maximum length to truncate to."""
    value = "" if slot.value is None else slot.value
    result = _coercer.coerce(value, str)
    if not result:
        return result.error
    text = result.value
    if isinstance(options, int) and not isinstance(options, bool) and len(text) > options:
        text = text[:options]
    slot.value = text
    return None


integer = _coercion(int)
floating = _coercion(float)
boolean = _coercion(bool)
timestamp = _coercion(datetime)
mapping = _coercion(dict)
sequence = _coercion(list)


# Type checks


def _type_check(types: type | tuple[type, ...], label: str) -> Callable[[Slot, Any], Any]:
    def check(slot: Slot, options: Any = None) -> Any:
        value = slot.value
        # bool is an int subclass; only is_boolean accepts it
        if isinstance(value, bool) and bool not in (types if isinstance(types, tuple) else (types,)):
            return f"Expected {label}, got bool"
        if not isinstance(value, types):
            return f"Expected {label}, got {type(value).__name__}"
        return None

    check.__name__ = f"is_{label}"
    return check


# Flow control


def null(slot: Slot, options: Any = None) -> Any:
    """Stop without error when the value is None."""
    if slot.value is None:
        return False
    return None


def required(slot: Slot, options: Any = None) -> Any:
    """Fail on None, and on empty strings/collections unless allowed.

    Options:
        ``True`` or ``{"allow_empty": True}`` to accept empty values.
    """
    value = slot.value
    if value is None:
        return "Value is required"
    allow_empty = options is True or (isinstance(options, Mapping) and options.get("allow_empty", False))
    if not allow_empty and isinstance(value, (str, list, dict, set, tuple)) and len(value) == 0:
        return "Value cannot be empty"
    return None


def default(slot: Slot, options: Any = None) -> Any:
    """Replace None with (a copy of) the option value."""
    if slot.value is None:
        slot.value = copy.deepcopy(options)
    return None


# Transforms


def trim(slot: Slot, options: Any = None) -> Any:
    """Strip surrounding whitespace, or the characters given as option."""
    if isinstance(slot.value, str):
        slot.value = slot.value.strip(options if isinstance(options, str) else None)
    return None


# Constraints


def length(slot: Slot, options: Any = None) -> Any:
    """Check the length of strings and collections."""
    limits = _bounds(options, kind="length")
    value = slot.value
    if value is None:
        return None
    if not hasattr(value, '__len__'):
        return f"Value does not have a length: {type(value).__name__}"

    size = len(value)
    errors = []
    if limits.get("min") is not None and size < limits["min"]:
        errors.append(f"Length {size} is less than minimum {limits['min']}")
    if limits.get("max") is not None and size > limits["max"]:
        errors.append(f"Length {size} is greater than maximum {limits['max']}")
    return "; ".join(errors) if errors else None


def value_range(slot: Slot, options: Any = None) -> Any:
    """Check that a number lies within bounds.

    Options:
        ``(min, max)`` or ``{"min", "max", "min_exclusive", "max_exclusive"}``.
    """
    limits = _bounds(options, kind="range")
    value = slot.value
    if value is None:
        return None
    if not isinstance(value, Number) or isinstance(value, bool):
        return f"Value must be a number, got {type(value).__name__}"
    if isinstance(value, float) and math.isnan(value):
        return "Value is NaN (Not a Number), which is not valid for range comparisons"

    low, high = limits.get("min"), limits.get("max")
    errors = []
    if low is not None:
        if limits.get("min_exclusive", False):
            if value <= low:
                errors.append(f"Value {value} must be greater than {low}")
        elif value < low:
            errors.append(f"Value {value} is less than minimum {low}")
    if high is not None:
        if limits.get("max_exclusive", False):
            if value >= high:
                errors.append(f"Value {value} must be less than {high}")
        elif value > high:
            errors.append(f"Value {value} is greater than maximum {high}")
    return "; ".join(errors) if errors else None


def _compile(options: Any) -> re.Pattern:
    if isinstance(options, re.Pattern):
        return options
    if not isinstance(options, str):
        raise SchemeError(
            f"Invalid regexp options: {options!r}",
            context={"filter": "regexp", "options": options},
        )
    try:
        return re.compile(options)
    except re.error as e:
        raise SchemeError(
            f"Invalid regexp pattern {options!r}: {e}",
            context={"filter": "regexp", "options": options},
        ) from e


def regexp(slot: Slot, options: Any = None) -> Any:
    """Check that a string contains a match for the option pattern."""
    pattern = _compile(options)
    value = slot.value
    if value is None:
        return None
    if not isinstance(value, str):
        return f"Value must be a string for pattern matching, got {type(value).__name__}"
    if not pattern.search(value):
        return f"Value '{value}' does not match pattern '{pattern.pattern}'"
    return None


def enum(slot: Slot, options: Any = None) -> Any:
    """Check that the value is one of the allowed values.

    Options:
        A list of values, or ``{"values": [...], "case_sensitive": False}``.
    """
    value = slot.value
    if value is None:
        return None
    if isinstance(options, Mapping):
        values = list(options.get("values", []))
        case_sensitive = options.get("case_sensitive", True)
    else:
        values = list(options or [])
        case_sensitive = True

    if case_sensitive:
        found = value in values
    else:
        fold = (lambda v: v.lower() if isinstance(v, str) else v)
        found = fold(value) in [fold(v) for v in values]
    if not found:
        return f"Value '{value}' is not in allowed values: {', '.join(repr(v) for v in values)}"
    return None


# Structural filters; these recurse into the strainer


def make_array_of(strainer: Strainer) -> Callable[[Slot, Any], Any]:
    """Build the ``array_of`` filter bound to a strainer.

    The option is the scheme every element must satisfy. A value that is not
    a list is replaced by an empty list and reported as an error. Elements
    are strained with the force mode of the call in flight, and the error
    payload maps failing indexes to their result trees.
    """

    def array_of(slot: Slot, options: Any = None) -> Any:
        value = slot.value
        if isinstance(value, tuple):
            value = list(value)
            slot.value = value
        if not isinstance(value, list):
            slot.value = []
            return f"Expected a list, got {type(value).__name__}"

        force = strainer.active_force
        failures = {}
        for index, item in enumerate(value):
            outcome = strainer.run(item, options, force)
            value[index] = outcome.data
            if not outcome.valid:
                failures[index] = outcome.errors
        if failures:
            return Verdict.fail(failures)
        return None

    return array_of


def make_mixed(strainer: Strainer) -> Callable[[Slot, Any], Any]:
    """Build the ``mixed`` filter bound to a strainer.

    The option lists alternative schemes: names, chains, object schemas or
    ``(name, options)`` pairs. A mapping option lists named filters with their
    options instead, each one an alternative. Each alternative is tried on a
    copy of the value; the first one that validates wins and its strained
    value is kept.
    """

    def mixed(slot: Slot, options: Any = None) -> Any:
        if not options:
            return "No alternatives to match"
        if isinstance(options, Mapping):
            alternatives = [[item] for item in options.items()]
        else:
            alternatives = [_as_alternative(item) for item in options]

        force = strainer.active_force
        for alternative in alternatives:
            outcome = strainer.run(copy.deepcopy(slot.value), alternative, force)
            if outcome.valid:
                slot.value = outcome.data
                return None
        return "Value matches none of the alternatives"

    return mixed


def _as_alternative(item: Any) -> Any:
    # ("length", (1, 3)) names a filter with options, like inside a chain
    if isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], str):
        return [item]
    return item


BUILTIN_FILTERS: dict[str, Callable[[Slot, Any], Any]] = {
    "string": string,
    "integer": integer,
    "float": floating,
    "boolean": boolean,
    "datetime": timestamp,
    "mapping": mapping,
    "list": sequence,
    "is_string": _type_check(str, "string"),
    "is_integer": _type_check(int, "integer"),
    "is_float": _type_check(float, "float"),
    "is_boolean": _type_check(bool, "boolean"),
    "is_list": _type_check(list, "list"),
    "is_mapping": _type_check(Mapping, "mapping"),
    "null": null,
    "required": required,
    "default": default,
    "trim": trim,
    "length": length,
    "range": value_range,
    "regexp": regexp,
    "enum": enum,
}


def register_builtin_filters(strainer: Strainer) -> list[str]:
    """Register the built-in filters in a strainer's registry.

    Existing schemes with the same names are replaced.

    Args:
        strainer: Strainer whose registry receives the filters

    Returns:
        Names of the registered filters
    """
    filters = dict(BUILTIN_FILTERS)
    filters["array_of"] = make_array_of(strainer)
    filters["mixed"] = make_mixed(strainer)

    for name, func in filters.items():
        strainer.register(name, func)
    logger.debug(f"Registered {len(filters)} built-in filters in {strainer.registry.name}")
    return list(filters)
