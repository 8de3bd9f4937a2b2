"""Type coercion with predictable, consistent behavior.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class CoercionResult:
    """Outcome of a single coercion."""

    valid: bool
    value: Any
    error: str | None = None

    def __bool__(self) -> bool:
        return self.valid

    @classmethod
    def success(cls, value: Any) -> CoercionResult:
        return cls(valid=True, value=value)

    @classmethod
    def failure(cls, value: Any, error: str) -> CoercionResult:
        return cls(valid=False, value=value, error=error)


DATETIME_FORMATS = [
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S.%f',
    '%Y-%m-%dT%H:%M:%S.%fZ',
    '%Y/%m/%d %H:%M:%S',
    '%Y/%m/%d',
    '%Y-%m-%d',
    '%d/%m/%Y',
    '%d-%m-%Y',
]


class Coercer:
    """Type coercion with predictable results.

    Always returns CoercionResult, never raises exceptions.
    Provides clear error messages when coercion fails.
    """

    def coerce(self, value: Any, target_type: type) -> CoercionResult:
        """Coerce a value to the target type.

        Args:
            value: Value to coerce
            target_type: Target Python type (str, int, float, bool, datetime, dict, list)

        Returns:
            CoercionResult with coerced value or error
        """
        if value is None:
            return CoercionResult.failure(None, f"Cannot coerce None to {target_type.__name__}")

        # bool is a subclass of int, but True is not an integer value here
        if isinstance(value, target_type) and not (target_type is int and isinstance(value, bool)):
            return CoercionResult.success(value)

        try:
            return CoercionResult.success(self._coerce_value(value, target_type))
        except (ValueError, TypeError, OverflowError) as e:
            return CoercionResult.failure(
                value,
                f"Cannot coerce {type(value).__name__} to {target_type.__name__}: {e!s}"
            )

    def _coerce_value(self, value: Any, target_type: type) -> Any:
        """Perform the actual coercion.

        Raises:
            ValueError: If the value has no sensible representation in the target type
            TypeError: If the value's type cannot be converted at all
        """
        if target_type == str:
            if isinstance(value, (dict, list, tuple, set)):
                raise TypeError("containers have no string form")
            if isinstance(value, bytes):
                return value.decode('utf-8')
            return str(value)

        elif target_type == int:
            if isinstance(value, str):
                value = value.strip()
                if value.lower() in ('true', 'false'):
                    return 1 if value.lower() == 'true' else 0
                if value.startswith(('0x', '0X')):
                    return int(value, 16)
                elif value.startswith(('0o', '0O')):
                    return int(value, 8)
                elif value.startswith(('0b', '0B')):
                    return int(value, 2)
                return int(value)
            elif isinstance(value, float):
                if value != int(value):
                    raise ValueError(f"Float {value} cannot be losslessly converted to int")
                return int(value)
            elif isinstance(value, bool):
                return 1 if value else 0
            return int(value)

        elif target_type == float:
            if isinstance(value, str):
                value = value.strip()
                if value.lower() in ('true', 'false'):
                    return 1.0 if value.lower() == 'true' else 0.0
                return float(value)
            elif isinstance(value, bool):
                return 1.0 if value else 0.0
            return float(value)

        elif target_type == bool:
            if isinstance(value, str):
                value = value.strip().lower()
                if value in ('true', '1', 'yes', 'y', 'on'):
                    return True
                elif value in ('false', '0', 'no', 'n', 'off', ''):
                    return False
                raise ValueError(f"String '{value}' is not a valid boolean")
            return bool(value)

        elif target_type == datetime:
            if isinstance(value, str):
                for fmt in DATETIME_FORMATS:
                    try:
                        return datetime.strptime(value, fmt)
                    except ValueError:
                        continue
                try:
                    return datetime.fromisoformat(value.replace('Z', '+00:00'))
                except ValueError:
                    pass
                raise ValueError(f"Could not parse datetime from '{value}'")
            elif isinstance(value, (int, float)) and not isinstance(value, bool):
                # Unix timestamp
                return datetime.fromtimestamp(value)
            raise TypeError(f"Cannot coerce {type(value).__name__} to datetime")

        elif target_type == dict:
            if isinstance(value, str):
                parsed = json.loads(value)
                if not isinstance(parsed, dict):
                    raise ValueError("JSON text is not an object")
                return parsed
            elif isinstance(value, (list, tuple)):
                if all(isinstance(item, (list, tuple)) and len(item) == 2 for item in value):
                    return dict(value)
                raise ValueError("Cannot convert list to dict")
            return dict(value)

        elif target_type == list:
            if isinstance(value, str):
                try:
                    result = json.loads(value)
                except json.JSONDecodeError:
                    if ',' in value:
                        return [v.strip() for v in value.split(',')]
                    return [value]
                return result if isinstance(result, list) else [result]
            elif isinstance(value, dict):
                return list(value.items())
            elif hasattr(value, '__iter__') and not isinstance(value, bytes):
                return list(value)
            return [value]

        return target_type(value)
