"""Structural force modes for reconciling objects against object schemes."""

from __future__ import annotations

from enum import Flag

from .exceptions import ConfigurationError


class ForceMode(Flag):
    """How the reconciler may edit the structure of object values.

    The two bits are independent:

    - ``ADD_MISSING``: fields declared by the scheme but absent from the data
      are inserted with a ``None`` value before they are evaluated.
    - ``REMOVE_EXTRA``: fields present in the data but not declared by the
      scheme are deleted.

    The four named modes are the combinations of these bits.
    """

    NOCHANGE = 0
    ADD_MISSING = 1
    REMOVE_EXTRA = 2
    COMPLETE = ADD_MISSING
    TRUNCATE = REMOVE_EXTRA
    SANITIZE = ADD_MISSING | REMOVE_EXTRA

    @property
    def adds_missing(self) -> bool:
        return bool(self & ForceMode.ADD_MISSING)

    @property
    def removes_extra(self) -> bool:
        return bool(self & ForceMode.REMOVE_EXTRA)

    @classmethod
    def parse(cls, value: ForceMode | str | int) -> ForceMode:
        """Convert a mode name, bit value or mode into a ForceMode.

        Args:
            value: ``"sanitize"``, ``"COMPLETE"``, ``3``, ``ForceMode.TRUNCATE``...

        Returns:
            The matching ForceMode

        Raises:
            ConfigurationError: If the value does not name a mode
        """
        if isinstance(value, ForceMode):
            return value
        # bool is an int, but True/False are not mode values
        if isinstance(value, int) and not isinstance(value, bool):
            if 0 <= value <= 3:
                return cls(value)
        elif isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ConfigurationError(
            f"Unknown force mode: {value!r}",
            context={"value": value, "allowed": ["nochange", "complete", "truncate", "sanitize"]},
        )
