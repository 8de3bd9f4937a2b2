"""Name-keyed store of reusable schemes.

Example:
    ```python
    from dataknobs_strain.registry import SchemeRegistry

    registry = SchemeRegistry("schemes")
    registry.register("username", ["string", {"length": (3, 20)}])
    registry.lookup("username")
    # Chain([...])
    ```

The registry is meant to be filled during start-up and then read by any
number of evaluations. Mutation is serialized with a lock, but changing
entries while evaluations are running is not supported; call ``freeze()``
once initialization is done to make that a hard error.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List

from .exceptions import RegistryFrozenError, SchemeError, SchemeNotFoundError
from .scheme import Reference, Scheme, as_scheme, is_scheme_like

logger = logging.getLogger(__name__)


class SchemeRegistry:
    """Registry of named schemes.

    Attributes:
        name: Name of the registry (for logging/debugging)

    Args:
        name: Name for this registry instance
    """

    def __init__(self, name: str = "schemes"):
        """Initialize the registry.

        Args:
            name: Registry name for identification
        """
        self._name = name
        self._items: Dict[str, Scheme] = {}
        self._lock = threading.RLock()
        self._frozen = False

    @property
    def name(self) -> str:
        """Get registry name."""
        return self._name

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject any further register/unregister/clear calls."""
        with self._lock:
            self._frozen = True
            logger.debug(f"Registry '{self._name}' frozen with {len(self._items)} schemes")

    def _check_mutable(self, operation: str, key: str | None = None) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot {operation} on frozen registry {self._name}",
                context={"registry": self._name, "operation": operation, "key": key},
            )

    def register(self, key: str, scheme: Any) -> bool:
        """Register a scheme under a name, replacing any previous one.

        Only the outer shape of the scheme is checked; nested parts are
        checked when they are evaluated.

        Args:
            key: Non-empty scheme name
            scheme: Unit, chain, object schema or reference (raw or normalized)

        Returns:
            True if registered, False if the name is empty or the scheme has
            none of the scheme shapes

        Raises:
            RegistryFrozenError: If the registry is frozen
        """
        if not isinstance(key, str) or not key or not is_scheme_like(scheme):
            logger.debug(f"Rejected registration of {key!r} in {self._name}")
            return False

        try:
            normalized = as_scheme(scheme)
        except SchemeError:
            return False

        with self._lock:
            self._check_mutable("register", key)
            if key in self._items:
                logger.debug(f"Replacing scheme '{key}' in {self._name}")
            self._items[key] = normalized
        return True

    def unregister(self, key: str) -> bool:
        """Remove a scheme by name.

        Args:
            key: Scheme name

        Returns:
            True if removed, False if it was not registered

        Raises:
            RegistryFrozenError: If the registry is frozen
        """
        with self._lock:
            self._check_mutable("unregister", key)
            if key not in self._items:
                return False
            del self._items[key]
            logger.debug(f"Unregistered scheme '{key}' from {self._name}")
            return True

    def lookup(self, key: str) -> Scheme:
        """Get a scheme by name.

        Args:
            key: Scheme name

        Returns:
            The registered scheme

        Raises:
            SchemeNotFoundError: If no scheme has this name
        """
        with self._lock:
            if key not in self._items:
                raise SchemeNotFoundError(
                    f"Scheme not found: {key}",
                    context={"name": key, "registry": self._name, "available": list(self._items.keys())},
                )
            return self._items[key]

    def get_optional(self, key: str) -> Scheme | None:
        """Get a scheme by name, returning None if not found."""
        with self._lock:
            return self._items.get(key)

    def resolve(self, key: str) -> Scheme:
        """Look up a name and follow name-to-name aliases to the final scheme.

        Args:
            key: Scheme name

        Returns:
            First scheme along the alias path that is not a Reference

        Raises:
            SchemeNotFoundError: If any name along the path is not registered
            SchemeError: If the aliases form a cycle
        """
        seen = [key]
        scheme = self.lookup(key)
        while isinstance(scheme, Reference):
            if scheme.name in seen:
                raise SchemeError(
                    f"Circular scheme reference: {' -> '.join(seen + [scheme.name])}",
                    context={"path": seen + [scheme.name], "registry": self._name},
                )
            seen.append(scheme.name)
            scheme = self.lookup(scheme.name)
        return scheme

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._items

    def list(self) -> Dict[str, Scheme]:
        """Get all registered schemes.

        Returns:
            A copy of the name -> scheme mapping
        """
        with self._lock:
            return dict(self._items)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._items.keys())

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        """Remove every scheme.

        Raises:
            RegistryFrozenError: If the registry is frozen
        """
        with self._lock:
            self._check_mutable("clear")
            self._items.clear()

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return f"SchemeRegistry({self._name!r}, {self.count()} schemes)"
